import re
import getpass

from pwdsafe.errors import NoPassphraseProvided


def get_pass(prompt: str) -> str:
    """
    Prompt for a secret without echoing it.

    Args:
        prompt: Text displayed to the user.

    Returns:
        The entered secret.

    Raises:
        NoPassphraseProvided: If the user entered nothing.
    """
    password = getpass.getpass(prompt)
    if not password:
        raise NoPassphraseProvided()
    return password


def ask(prompt: str, default: str = "") -> str:
    """
    Prompt for a line of text.

    Returns:
        The stripped answer, or `default` if the user just pressed Enter.
    """
    val = input(prompt).strip()
    return val or default


def ask_yes_no(prompt: str, default: bool = True) -> bool:
    """
    Prompt for a yes/no answer.

    Accepts y, yes, n and no in any case. Anything else, including an
    empty answer, gives `default`.
    """
    val = input(prompt).strip()
    if re.fullmatch(r"[nN][oO]|[nN]", val):
        return False
    if re.fullmatch(r"[yY][eE][sS]|[yY]", val):
        return True
    return default


def parse_int(val, default=None):
    """
    Parse a positive integer from user input.

    Args:
        val: An int, a string of digits, or anything else.
        default: Returned for empty, zero or non-numeric input.

    Returns:
        The integer value, or `default`.
    """
    if isinstance(val, bool):
        return default
    if isinstance(val, int):
        return val if val > 0 else default
    if isinstance(val, str) and re.fullmatch(r"[0-9]+", val.strip()):
        num = int(val.strip())
        return num if num > 0 else default
    return default
