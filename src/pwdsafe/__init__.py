"""
pwdsafe - a local password safe

Username/password records live in a single symmetrically encrypted file.
Every write re-encrypts the whole safe to a temporary file and atomically
replaces the original, so the safe on disk is never half written.
"""
from pwdsafe.config.config_safe import VERSION

__version__ = VERSION
