import os
import logging
from pathlib import Path

from pwdsafe.config.config_safe import *
from pwdsafe.config.logging_config import log_error
from pwdsafe.errors import (DecryptionFailed, EmptySafe, EncryptionFailed,
                            NoPassphraseProvided)
from .Entry import Entry
from .safe_records import (append_entry, filter_noise_lines, filter_out_user,
                           parse_lines, render, select_user, stamp)

logger = logging.getLogger(__name__)


def safe_has_data(safe_path: Path) -> bool:
    """True if the safe exists as a regular file and is not empty."""
    safe_path = Path(safe_path)
    return safe_path.is_file() and safe_path.stat().st_size > 0


def new_safe_path(safe_path: Path) -> Path:
    """Temporary file the next safe is written to, beside the original."""
    safe_path = Path(safe_path)
    return safe_path.with_name(safe_path.name + NEW_SUFFIX)


def _check_passphrase(passphrase: str) -> None:
    if not passphrase:
        raise NoPassphraseProvided()


def load_safe(passphrase: str, *, cipher, safe_path: Path,
              must_exist: bool = True) -> list[str]:
    """
    Decrypt the safe and split it into lines.

    Args:
        passphrase: Safe passphrase.
        cipher: Cipher adapter used for decryption.
        safe_path: Path to the encrypted safe.
        must_exist: If False, a missing or empty safe yields no lines
            instead of an error.

    Returns:
        The decrypted lines in file order.

    Raises:
        NoPassphraseProvided: If the passphrase is empty.
        EmptySafe: If the safe is missing or empty and must_exist is set.
        DecryptionFailed: Wrong passphrase or corrupted safe.
    """
    _check_passphrase(passphrase)
    safe_path = Path(safe_path)

    if not safe_has_data(safe_path):
        if must_exist:
            raise EmptySafe()
        return []

    ciphertext = safe_path.read_bytes()
    try:
        plaintext = cipher.decrypt(passphrase, ciphertext)
    except DecryptionFailed:
        log_error(logger, f"Decryption failed for {safe_path}")
        raise
    return parse_lines(plaintext)


def read_entries(passphrase: str, username: str, *, cipher,
                 safe_path: Path) -> list[str]:
    """
    Read the record lines for a username ("" or "all" for every record).

    Raises:
        EmptySafe: If the safe is missing or empty.
        DecryptionFailed: Wrong passphrase or corrupted safe.
    """
    lines = load_safe(passphrase, cipher=cipher, safe_path=safe_path)
    return select_user(lines, username)


def commit_safe(passphrase: str, lines: list[str], *, cipher,
                safe_path: Path) -> None:
    """
    Encrypt lines to a new safe file and atomically replace the old one.

    The ciphertext is written to `<safe>.new`, flushed and fsynced, then
    renamed over the safe. Until the rename succeeds the original file is
    never opened for writing. The temporary file is removed on any failure.

    Raises:
        EncryptionFailed: If encryption or any filesystem step fails.
    """
    safe_path = Path(safe_path)
    tmp = new_safe_path(safe_path)
    committed = False
    try:
        ciphertext = cipher.encrypt(passphrase, render(lines))

        # Write to temporary file first.
        with open(tmp, "wb") as f:
            f.write(ciphertext)
            f.flush()
            os.fsync(f.fileno()) # force to disk
        os.chmod(tmp, SAFE_MODE)

        # Atomic replace the safe file.
        os.replace(tmp, safe_path)
        committed = True
    except OSError as e:
        log_error(logger, f"Could not write {tmp}: {e.strerror}")
        raise EncryptionFailed() from e
    finally:
        if not committed:
            tmp.unlink(missing_ok=True)


def write_entry(passphrase: str, entry: Entry, *, cipher,
                safe_path: Path) -> int:
    """
    Store an entry, replacing any earlier lines for the same username.

    Steps:
        1. Decrypt the existing safe, if any. Failure aborts the write.
        2. Remove every line of entry.username.
        3. Append the entry, drop blank and mtime lines, append a fresh mtime.
        4. Encrypt to `<safe>.new` and atomically replace the safe.

    A cleared entry (empty password) leaves no line behind for the username.

    Args:
        passphrase: Safe passphrase.
        entry: Entry to store.
        cipher: Cipher adapter.
        safe_path: Path to the encrypted safe.

    Returns:
        The number of earlier lines removed for the username.

    Raises:
        NoPassphraseProvided: Empty passphrase, nothing is touched.
        DecryptionFailed: Existing safe could not be decrypted.
        EncryptionFailed: New safe could not be written. The original
            safe is unchanged.
    """
    lines = load_safe(passphrase, cipher=cipher, safe_path=safe_path,
                      must_exist=False)

    kept = filter_out_user(lines, entry.username)
    removed = len(lines) - len(kept)

    composed = stamp(filter_noise_lines(append_entry(kept, entry)))

    commit_safe(passphrase, composed, cipher=cipher, safe_path=safe_path)
    return removed


def delete_entry(passphrase: str, username: str, *, cipher,
                 safe_path: Path) -> int:
    """
    Remove every line of a username from the safe.

    Modeled as a write of a cleared entry.

    Returns:
        The number of lines removed.

    Raises:
        InvalidEntry: If the username is empty.
        EmptySafe: If the safe is missing or empty.
        DecryptionFailed: Wrong passphrase or corrupted safe.
        EncryptionFailed: New safe could not be written.
    """
    entry = Entry(username=username or "")
    _check_passphrase(passphrase)
    if not safe_has_data(safe_path):
        raise EmptySafe()
    return write_entry(passphrase, entry, cipher=cipher, safe_path=safe_path)
