"""
Exceptions raised by the safe.

Every failure aborts the current operation. The CLI is the only place that
turns these into an error message and a non-zero exit status.
"""


class SafeError(Exception):
    """Base class for all safe failures."""

    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NoPassphraseProvided(SafeError):
    """Empty passphrase entered. Raised before the safe is touched."""

    message = "No password provided"


class EmptySafe(SafeError):
    """Read or delete attempted against a missing or zero-byte safe."""

    message = "No passwords found"


class DecryptionFailed(SafeError):
    """
    Wrong passphrase or corrupted ciphertext.

    The two causes are reported identically.
    """

    message = "Decryption failed"


class EncryptionFailed(SafeError):
    """Writing the new safe failed. The original safe is untouched."""

    message = "Write to safe failed"


class RandomSourceUnavailable(SafeError):
    message = "Random source unavailable"


class CipherUnavailable(SafeError):
    message = "GnuPG is not available"


class EntryNotFound(SafeError):
    message = "No matching passwords found"


class InvalidEntry(SafeError, ValueError):
    """A username or password that cannot be stored as a record line."""

    message = "Invalid entry"


class PassphraseTooLong(SafeError):
    message = "Password too long"
