import re
from dataclasses import dataclass, field
from pwdsafe.errors import InvalidEntry

# Line written for a cleared entry. It is stripped before the safe is committed.
PLACEHOLDER = " "

# "<anything><whitespace><username>", trailing whitespace tolerated
LINE_RE = re.compile(r"(.*)\s(\S+)\s*")


@dataclass
class Entry:
    """
    Represents a single safe record.

    Stored on disk as one line: "<password> <username>". The username is
    always the last whitespace-separated token of its line. An empty
    password marks a cleared (deleted) entry.
    """
    username: str
    password: str = field(default='', repr=False)

    def __post_init__(self): # logic after the built-in __init__ method has been called.
        """
        Validate and normalize fields.

        Ensures the username is a single non-empty token and the password
        fits on one line.
        """
        if not isinstance(self.username, str):
            raise InvalidEntry("Username must be a string")

        self.username = self.username.strip()
        if not self.username:
            raise InvalidEntry("Username cannot be empty")
        if len(self.username.split()) != 1:
            raise InvalidEntry("Username cannot contain whitespace")

        if not isinstance(self.password, str):
            raise InvalidEntry("Password must be a string")
        if "\n" in self.password or "\r" in self.password:
            raise InvalidEntry("Password cannot contain line breaks")
        if self.password and not self.password.strip():
            raise InvalidEntry("Password cannot be only whitespace")

    def __repr__(self):
        return (
            f"Entry(username={self.username}, "
            f"pw={'<hidden>' if self.password else '<cleared>'})"
        )

    @property
    def cleared(self) -> bool:
        return not self.password

    def to_line(self) -> str:
        """
        Serialize the entry to a safe line.

        Returns:
            "<password> <username>", or the blank placeholder if cleared.
        """
        if self.cleared:
            return PLACEHOLDER
        return f"{self.password} {self.username}"

    @classmethod
    def from_line(cls, line: str) -> "Entry | None":
        """
        Reconstruct an entry from a stored line.

        Args:
            line: A decrypted safe line.

        Returns:
            The Entry, or None if the line is not a record (blank, metadata,
            or garbage without a username token).
        """
        match = LINE_RE.fullmatch(line)
        if match is None:
            return None
        password, username = match.groups()
        # Whitespace-only passwords come from older safes, read them as cleared
        if not password.strip():
            password = ""
        try:
            return cls(username=username, password=password)
        except InvalidEntry:
            return None
