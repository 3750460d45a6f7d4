"""
In-memory form of a decrypted safe: an ordered list of lines.

Every function returns a new list and leaves its input alone. Surviving
lines keep their insertion order; nothing is ever sorted.
"""
import re

import pendulum

from pwdsafe.config.config_safe import *
from .Entry import Entry

MTIME_RE = re.compile(rf"^{MTIME_PREFIX}([0-9]+)$")
BLANK_RE = re.compile(r"^\s*$")


def parse_lines(plaintext: bytes) -> list[str]:
    """
    Split decrypted bytes into lines.

    No structural validation is done. A malformed safe yields garbage lines
    that the filters below tolerate.
    """
    return plaintext.decode(UTF8, errors="replace").splitlines()


def line_username(line: str) -> str | None:
    """Return the trailing username token of a record line, if it has one."""
    entry = Entry.from_line(line)
    return entry.username if entry else None


def matches_user(line: str, username: str) -> bool:
    # Exact, case-sensitive comparison on the trailing token
    return bool(username) and line_username(line) == username


def filter_out_user(lines: list[str], username: str) -> list[str]:
    """
    Remove every record line belonging to `username`.

    An empty username removes nothing.
    """
    if not username:
        return list(lines)
    return [line for line in lines if not matches_user(line, username)]


def filter_noise_lines(lines: list[str]) -> list[str]:
    """Remove blank lines and every mtime line."""
    return [line for line in lines
            if not BLANK_RE.match(line) and not MTIME_RE.match(line)]


def append_entry(lines: list[str], entry: Entry) -> list[str]:
    """
    Append an entry line.

    A cleared entry appends the blank placeholder, which filter_noise_lines
    drops before the safe is committed.
    """
    return [*lines, entry.to_line()]


def stamp(lines: list[str], now: int | None = None) -> list[str]:
    """Append an mtime line for `now` (defaults to the current epoch second)."""
    if now is None:
        now = pendulum.now().int_timestamp
    return [*lines, f"{MTIME_PREFIX}{now}"]


def render(lines: list[str]) -> bytes:
    return ("\n".join(lines) + "\n").encode(UTF8)


def is_record(line: str) -> bool:
    return line_username(line) is not None


def select_user(lines: list[str], username: str) -> list[str]:
    """
    Select the record lines to show for a read.

    Args:
        lines: Decrypted safe lines.
        username: Username to match. "" or "all" selects every record.

    Returns:
        Matching record lines in safe order. Metadata and blank lines are
        never returned.
    """
    if username in READ_ALL:
        return [line for line in lines if is_record(line)]
    return [line for line in lines if matches_user(line, username)]


def safe_mtime(lines: list[str]) -> pendulum.DateTime | None:
    """
    Last successful write time recorded in the safe.

    Returns:
        The time of the last mtime line, or None if the safe has none.
    """
    stamps = [m.group(1) for m in map(MTIME_RE.match, lines) if m]
    if not stamps:
        return None
    return pendulum.from_timestamp(int(stamps[-1]))
