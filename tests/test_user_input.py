import pytest

from pwdsafe.errors import NoPassphraseProvided
from pwdsafe.utils.user_input import ask, ask_yes_no, get_pass, parse_int


def test_get_pass(monkeypatch):
    monkeypatch.setattr("getpass.getpass", lambda prompt: "secret")
    assert get_pass("Password: ") == "secret"


def test_get_pass_empty(monkeypatch):
    monkeypatch.setattr("getpass.getpass", lambda prompt: "")
    with pytest.raises(NoPassphraseProvided) as exc:
        get_pass("Password: ")
    assert str(exc.value) == "No password provided"


def test_ask_default(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "   ")
    assert ask("Username? ", default="all") == "all"


def test_ask_strips(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "  alice ")
    assert ask("Username? ") == "alice"


@pytest.mark.parametrize("answer, expected", [
    ("n", False), ("N", False), ("no", False), ("NO", False),
    ("y", True), ("Yes", True), ("", True), ("maybe", True),
])
def test_ask_yes_no(monkeypatch, answer, expected):
    monkeypatch.setattr("builtins.input", lambda prompt: answer)
    assert ask_yes_no("Generate? ") is expected


def test_ask_yes_no_default_false(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "")
    assert ask_yes_no("Generate? ", default=False) is False


@pytest.mark.parametrize("val, expected", [
    (5, 5), ("7", 7), (" 8 ", 8), (0, None), ("0", None), ("-1", None), ("x", None), (None, None),
])
def test_parse_int(val, expected):
    assert parse_int(val) == expected
