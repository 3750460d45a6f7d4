import base64
import binascii
import logging
import os
import secrets
import shutil
import subprocess
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from argon2.low_level import hash_secret_raw, Type

from pwdsafe.config.config_safe import *
from pwdsafe.config.logging_config import log_error
from pwdsafe.errors import (CipherUnavailable, DecryptionFailed,
                            EncryptionFailed, PassphraseTooLong,
                            RandomSourceUnavailable)

logger = logging.getLogger(__name__)


def find_gpg() -> str | None:
    """
    Locate the GnuPG binary.

    Returns:
        Path of the first of GPG_CANDIDATES found on PATH, or None.
    """
    for name in GPG_CANDIDATES:
        path = shutil.which(name)
        if path:
            return path
    return None


class GpgCipher:
    """
    Symmetric encryption through the GnuPG binary.

    The passphrase is handed to gpg over an anonymous pipe
    (--passphrase-fd), never on the command line or in the environment.
    Output is ASCII armored.
    """

    def __init__(self, binary: str | None = None, homedir: str | None = None):
        self.binary = binary or find_gpg()
        if not self.binary:
            raise CipherUnavailable()
        self.homedir = homedir

    def _base_cmd(self) -> list[str]:
        cmd = [self.binary, "--batch", "--quiet", "--yes", "--no-tty"]
        if self.homedir:
            cmd += ["--homedir", str(self.homedir)]
        return cmd

    def _run(self, args: list[str], passphrase: str, data: bytes) -> subprocess.CompletedProcess:
        """
        Run gpg with the passphrase on a private pipe.

        Raises:
            PassphraseTooLong: If the passphrase would not fit in the pipe.
            CipherUnavailable: If the binary cannot be executed.
        """
        secret = passphrase.encode(UTF8) + b"\n"
        if len(secret) > MAX_PASSPHRASE_LEN:
            raise PassphraseTooLong()

        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, secret)
        except OSError:
            os.close(read_fd)
            raise
        finally:
            os.close(write_fd)

        cmd = self._base_cmd() + [
            "--pinentry-mode", "loopback",
            "--no-symkey-cache",
            "--passphrase-fd", str(read_fd),
        ] + args
        try:
            return subprocess.run(
                cmd,
                input=data,
                capture_output=True,
                pass_fds=(read_fd,),
                check=False,
            )
        except OSError as e:
            log_error(logger, f"Could not run {self.binary}: {e}")
            raise CipherUnavailable() from e
        finally:
            os.close(read_fd)

    def encrypt(self, passphrase: str, plaintext: bytes) -> bytes:
        proc = self._run(["--symmetric", "--armor"], passphrase, plaintext)
        if proc.returncode != 0 or not proc.stdout:
            log_error(logger, f"gpg encryption exited with status {proc.returncode}")
            raise EncryptionFailed()
        return proc.stdout

    def decrypt(self, passphrase: str, ciphertext: bytes) -> bytes:
        proc = self._run(["--decrypt"], passphrase, ciphertext)
        if proc.returncode != 0:
            raise DecryptionFailed()
        return proc.stdout

    def random_bytes(self, n: int) -> bytes:
        cmd = self._base_cmd() + ["--gen-random", str(GPG_RANDOM_LEVEL), str(n)]
        try:
            proc = subprocess.run(cmd, capture_output=True, check=False)
        except OSError as e:
            raise RandomSourceUnavailable() from e
        if proc.returncode != 0 or len(proc.stdout) < n:
            log_error(logger, f"gpg --gen-random exited with status {proc.returncode}")
            raise RandomSourceUnavailable()
        return proc.stdout[:n]


def derive_key(pw: bytes, salt: bytes, time_cost: int = ARGON_TIME,
               memory_cost: int = ARGON_MEMORY,
               parallelism: int = ARGON_PARALLELISM) -> bytes:
    """
    Derive a symmetric encryption key from a passphrase and salt using Argon2id.

    Args:
        pw: Passphrase as raw bytes.
        salt: Cryptographic salt as raw bytes.

    Returns:
        A raw 32-byte key.

    Security:
        - Argon2id provides resistance to brute force attacks.
        - The salt is not secret but is fresh for every encryption.
    """
    key = hash_secret_raw(
        secret=pw,
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=ARGON_HASH_LEN,
        type=Type.ID
    )
    return key


def armor(raw: bytes) -> bytes:
    """Wrap binary ciphertext in printable armor lines."""
    body = base64.b64encode(raw).decode("ascii")
    lines = [ARMOR_BEGIN]
    lines += [body[i:i + ARMOR_WIDTH] for i in range(0, len(body), ARMOR_WIDTH)]
    lines.append(ARMOR_END)
    return ("\n".join(lines) + "\n").encode("ascii")


def dearmor(armored: bytes) -> bytes:
    """
    Inverse of `armor`.

    Raises:
        ValueError: If the armor lines are missing or the body is not base64.
    """
    lines = [line.strip() for line in armored.decode("ascii").splitlines() if line.strip()]
    if len(lines) < 3 or lines[0] != ARMOR_BEGIN or lines[-1] != ARMOR_END:
        raise ValueError("Missing armor")
    return base64.b64decode("".join(lines[1:-1]), validate=True)


class NativeCipher:
    """
    In-process symmetric encryption: Argon2id key derivation and
    ChaCha20-Poly1305, with armored output.

    Layout of the armored body: salt | nonce | ciphertext + tag. The armor
    header is bound to the ciphertext as associated data.
    """

    def __init__(self, time_cost: int = ARGON_TIME,
                 memory_cost: int = ARGON_MEMORY,
                 parallelism: int = ARGON_PARALLELISM):
        self.time_cost = time_cost
        self.memory_cost = memory_cost
        self.parallelism = parallelism

    def _key(self, passphrase: str, salt: bytes) -> bytes:
        return derive_key(passphrase.encode(UTF8), salt,
                          time_cost=self.time_cost,
                          memory_cost=self.memory_cost,
                          parallelism=self.parallelism)

    def encrypt(self, passphrase: str, plaintext: bytes) -> bytes:
        try:
            salt = secrets.token_bytes(SALT_LEN)
            nonce = secrets.token_bytes(NONCE_LEN)
            aead = ChaCha20Poly1305(self._key(passphrase, salt))
            ciphertext = aead.encrypt(
                nonce=nonce,
                data=plaintext,
                associated_data=ARMOR_BEGIN.encode("ascii")
            )
        except Exception as e:
            log_error(logger, f"Native encryption failed: {type(e).__name__}")
            raise EncryptionFailed() from e
        return armor(salt + nonce + ciphertext)

    def decrypt(self, passphrase: str, ciphertext: bytes) -> bytes:
        try:
            raw = dearmor(ciphertext)
            if len(raw) < SALT_LEN + NONCE_LEN + TAG_LEN:
                raise ValueError("Truncated safe")
            salt = raw[:SALT_LEN]
            nonce = raw[SALT_LEN:SALT_LEN + NONCE_LEN]
            body = raw[SALT_LEN + NONCE_LEN:]
            aead = ChaCha20Poly1305(self._key(passphrase, salt))
            return aead.decrypt(
                nonce=nonce,
                data=body,
                associated_data=ARMOR_BEGIN.encode("ascii")
            )
        except (InvalidTag, ValueError, binascii.Error, UnicodeDecodeError):
            # Same failure for a wrong passphrase and a damaged safe
            raise DecryptionFailed() from None

    def random_bytes(self, n: int) -> bytes:
        try:
            return secrets.token_bytes(n)
        except (OSError, NotImplementedError) as e:
            raise RandomSourceUnavailable() from e


def get_cipher(backend: str | None = None):
    """
    Build the cipher for a backend name.

    Args:
        backend: "gpg" or "native". Defaults to DEFAULT_CIPHER.

    Raises:
        CipherUnavailable: For an unknown backend, or if GnuPG is missing.
    """
    backend = (backend or DEFAULT_CIPHER).strip().lower()
    if backend == "gpg":
        return GpgCipher()
    if backend == "native":
        return NativeCipher()
    raise CipherUnavailable(f"Unknown cipher backend '{backend}'")
