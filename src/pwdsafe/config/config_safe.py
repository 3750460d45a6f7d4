# config_safe.py
"""
Configuration constants
"""
# ==============================================================
# Safe settings
# ==============================================================
# Software version
VERSION = "1.0.0"

# Encrypted safe file. PWDSH_SAFE overrides the default at run time.
SAFE_ENV = "PWDSH_SAFE"
DEFAULT_SAFE_FILE = "pwd.sh.safe"

# Suffix of the temporary safe written before the atomic replace
NEW_SUFFIX = ".new"

# Committed safes are owner read/write only
SAFE_MODE = 0o600

# ==============================================================
# Cipher settings
# ==============================================================
# "gpg" drives the GnuPG binary, "native" uses Argon2id + ChaCha20Poly1305.
CIPHER_ENV = "PWDSH_CIPHER"
DEFAULT_CIPHER = "gpg"

# Binaries tried in order when looking for GnuPG
GPG_CANDIDATES = ("gpg", "gpg2")

# gpg --gen-random quality level
GPG_RANDOM_LEVEL = 0

# Longest passphrase handed to gpg, in encoded bytes. It must fit in the pipe
# buffer since it is written before gpg starts reading.
MAX_PASSPHRASE_LEN = 4096

# Argon2id parameters for the native cipher
# Changing these does not affect existing safes, the salt travels with them.
ARGON_TIME = 6             # Iterations - controls CPU cost
ARGON_MEMORY = 256 * 1024  # 256 MiB - controls RAM cost
ARGON_PARALLELISM = 2
ARGON_HASH_LEN = 32        # bytes - Encryption key size - DO NOT CHANGE

# Length of generated random salt
SALT_LEN = 16

# ChaCha20Poly1305 nonce length. DO NOT CHANGE
NONCE_LEN = 12
TAG_LEN = 16

# Armor lines of a native safe
ARMOR_BEGIN = "-----BEGIN PWDSH SAFE-----"
ARMOR_END = "-----END PWDSH SAFE-----"
ARMOR_WIDTH = 64

# ==============================================================
# Password generation defaults
# ==============================================================
PASS_DEFAULTS = {
    "length": 50,                   # Default generated password length
    "max": 100,                     # Characters available after encoding
}

# ==============================================================
# Display & formatting
# ==============================================================
UTF8 = "utf-8"
DT_FORMAT = "MMM D, YYYY hh:mm:ss A"
MTIME_PREFIX = "mtime:"

# Usernames that mean "every entry" when reading
READ_ALL = ("", "all")

# ==============================================================
# Logging
# ==============================================================
LOG_FILE = "error.log"

# ==============================================================
# Optional: local overrides
# Local configuration file overrides standard config values
# ==============================================================
try:
    from .config_local import *
except ImportError:
    pass  # No local config - use defaults above
