import base64
import math

from pwdsafe.config.config_safe import *
from .user_input import *


def parse_length(value, default: int = PASS_DEFAULTS["length"],
                 max_len: int = PASS_DEFAULTS["max"]) -> int:
    """
    Turn a requested password length into a usable one.

    Zero, empty or non-numeric input silently falls back to `default`.
    Lengths above `max_len` are clamped to `max_len`.
    """
    length = parse_int(value, default=default)
    return min(length, max_len)


def gen_pass(cipher, length=PASS_DEFAULTS["length"],
             max_len: int = PASS_DEFAULTS["max"]) -> str:
    """
    Generate a random password from the cipher's entropy source.

    Enough bytes are requested that their base64 encoding holds at least
    `max_len` characters (4 characters for every 3 bytes). The encoding is
    then cut to the requested length.

    Args:
        cipher: Cipher adapter providing random_bytes().
        length: Requested length. Parsed with parse_length().
        max_len: Upper bound on the length.

    Returns:
        A password of printable base64 characters.

    Raises:
        RandomSourceUnavailable: If no entropy could be obtained.
    """
    length = parse_length(length, max_len=max_len)

    raw = cipher.random_bytes(math.ceil(max_len * 3 / 4))
    encoded = base64.b64encode(raw).decode("ascii")
    return encoded[:length]


def ask_length(default: int = PASS_DEFAULTS["length"],
               max_len: int = PASS_DEFAULTS["max"]) -> int:
    """Prompt for a password length. Invalid answers give the default."""
    val = ask(f"\n  Password length? (default: {default}, max: {max_len}) ")
    return parse_length(val, default=default, max_len=max_len)
