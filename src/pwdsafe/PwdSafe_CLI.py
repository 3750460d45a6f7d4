"""
pwdsafe - manage passwords in a symmetrically encrypted file

Usage:
    pwdsh [r|w|d] [username] [length] [q]

    r   read entries for a username, or all entries (default)
    w   write an entry, generating a password of `length` characters
        unless told otherwise. A trailing q keeps the password off screen.
    d   delete the entries of a username
"""
# ==============================================================
# Standard imports
# ==============================================================
import os
import re
import sys
import time
import logging
from pathlib import Path

# ==============================================================
# Other imports
# ==============================================================

try:
    from pwdsafe.config.config_safe import *
    from pwdsafe.config.logging_config import setup_logging, log_error
    from pwdsafe.errors import EmptySafe, EntryNotFound, SafeError
    from pwdsafe.utils.Entry import Entry
    from pwdsafe.utils.cipher_utils import get_cipher
    from pwdsafe.utils.safe_records import safe_mtime, select_user
    from pwdsafe.utils.safe_utils import load_safe, safe_has_data, write_entry, delete_entry
    from pwdsafe.utils.password_generator import gen_pass, ask_length
    from pwdsafe.utils.user_input import get_pass, ask, ask_yes_no

except ImportError as e:
    missing_package = e.name if hasattr(e, "name") else "unknown package"
    print("Missing required dependency!")
    print(f"  {missing_package} is not installed")
    logging.error(f"  {missing_package} is not installed. See pyproject.toml")
    print("\nInstall with:")
    print("  pip install pwdsafe")
    time.sleep(2)
    sys.exit(1)

logger = logging.getLogger(__name__)

# ==============================================================
# Functions
# ==============================================================

def arg(argv: list[str], i: int) -> str | None:
    """Positional argument `i`, or None if it was not given at all."""
    return argv[i] if len(argv) > i else None


def fail(msg: str) -> int:
    """
    Report a failed operation.

    Returns:
        The exit status for a failure.
    """
    print(f"Error: {msg}", file=sys.stderr)
    log_error(logger, msg)
    return 1


def unlock_prompt(safe_path: Path) -> str:
    return f"\n  Enter password to unlock {safe_path}: "


def read_pass(argv: list[str], cipher, safe_path: Path) -> None:
    """
    Print the entries of one username, or of all usernames.

    Raises:
        EmptySafe: Before any prompt, if there is no safe to read.
        EntryNotFound: If nothing matched.
    """
    if not safe_has_data(safe_path):
        raise EmptySafe()

    username = arg(argv, 1)
    if username is None:
        username = ask("\n  Username to read? (default: all) ")
    if username in READ_ALL:
        username = ""

    passphrase = get_pass(unlock_prompt(safe_path))
    print("\n")

    lines = load_safe(passphrase, cipher=cipher, safe_path=safe_path)
    del passphrase

    entries = select_user(lines, username)
    if not entries:
        raise EntryNotFound()
    for line in entries:
        print(line)

    mtime = safe_mtime(lines)
    if mtime is not None:
        print(f"\n  Last modified: {mtime.in_timezone('local').format(DT_FORMAT)}")


def create_username(argv: list[str], cipher) -> Entry:
    """
    Build the entry to write from arguments and prompts.

    With a length argument the password is generated without asking.
    Otherwise the user chooses between a generated and a typed password.
    """
    username = arg(argv, 1)
    if username is None:
        username = ask("\n  Username: ")
    entry = Entry(username=username)

    length = arg(argv, 2)
    if length is None:
        generate = ask_yes_no("\n  Generate password? (y/n, default: y) ")
    else:
        generate = True

    if not generate:
        password = get_pass(f'\n  Enter password for "{entry.username}": ')
        print()
        return Entry(username=entry.username, password=password)

    if length is None:
        length = ask_length()
    entry = Entry(username=entry.username, password=gen_pass(cipher, length))

    quiet = arg(argv, 3)
    if quiet is None or not re.fullmatch(r"[qQ]", quiet):
        print(f"\n  Password: {entry.password}")
    return entry


def write_pass(entry: Entry, cipher, safe_path: Path) -> None:
    passphrase = get_pass(unlock_prompt(safe_path))
    print()
    write_entry(passphrase, entry, cipher=cipher, safe_path=safe_path)
    del passphrase


def delete_pass(argv: list[str], cipher, safe_path: Path) -> None:
    username = arg(argv, 1)
    if username is None:
        username = ask("\n  Username to delete? ")
    entry = Entry(username=username)

    if not safe_has_data(safe_path):
        raise EmptySafe()

    passphrase = get_pass(unlock_prompt(safe_path))
    print()
    removed = delete_entry(passphrase, entry.username, cipher=cipher, safe_path=safe_path)
    del passphrase
    if not removed:
        print(f"  No entry for \"{entry.username}\" was stored.")


# ==============================================================
# MAIN
# ==============================================================
def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    safe_path = Path(os.environ.get(SAFE_ENV) or DEFAULT_SAFE_FILE)

    try:
        # Checked before anything else happens
        cipher = get_cipher(os.environ.get(CIPHER_ENV))

        action = arg(argv, 0)
        if action is None:
            action = ask("\n  Read, write, or delete password? (r/w/d, default: r) ")[:1]
            print()

        if re.fullmatch(r"[wW]", action):
            entry = create_username(argv, cipher)
            write_pass(entry, cipher, safe_path)

        elif re.fullmatch(r"[dD]", action):
            delete_pass(argv, cipher, safe_path)

        else:
            read_pass(argv, cipher, safe_path)

    except SafeError as e:
        return fail(str(e))
    except (KeyboardInterrupt, EOFError):
        print()
        return fail("Aborted")

    print("\nDone")
    return 0


def run() -> None:
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
