"""
Shared pytest fixtures.

The native cipher is built with minimal Argon2id costs so each
encrypt/decrypt takes milliseconds. Tests that need the GnuPG binary get a
private homedir and are skipped where gpg is not installed.
"""
import pytest

from pwdsafe.errors import EncryptionFailed
from pwdsafe.utils.cipher_utils import GpgCipher, NativeCipher, find_gpg


@pytest.fixture
def cipher():
    return NativeCipher(time_cost=1, memory_cost=8 * 1024, parallelism=1)


@pytest.fixture
def safe_path(tmp_path):
    return tmp_path / "pwd.sh.safe"


@pytest.fixture
def gpg_cipher(tmp_path):
    if find_gpg() is None:
        pytest.skip("GnuPG is not installed")
    homedir = tmp_path / "gnupg"
    homedir.mkdir(mode=0o700)
    return GpgCipher(homedir=str(homedir))


class FailingCipher:
    """Decrypts like the wrapped cipher but refuses to encrypt."""

    def __init__(self, inner):
        self.inner = inner

    def decrypt(self, passphrase, ciphertext):
        return self.inner.decrypt(passphrase, ciphertext)

    def encrypt(self, passphrase, plaintext):
        raise EncryptionFailed()

    def random_bytes(self, n):
        return self.inner.random_bytes(n)


@pytest.fixture
def failing_cipher(cipher):
    return FailingCipher(cipher)
