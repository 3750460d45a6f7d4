import re

import pendulum
import pytest

from pwdsafe.utils.Entry import Entry
from pwdsafe.utils.safe_records import (append_entry, filter_noise_lines,
                                        filter_out_user, parse_lines, render,
                                        safe_mtime, select_user, stamp)

LINES = [
    "s3cret alice",
    "hunter2 bob",
    "",
    "mtime:1700000000",
    "other alice",
    "pw alice bob",
    "   ",
    "pw2 malice",
]


def test_parse_lines():
    assert parse_lines(b"a alice\nb bob\nmtime:1\n") == ["a alice", "b bob", "mtime:1"]


def test_parse_lines_tolerates_garbage():
    lines = parse_lines(b"\xff\xfe junk\nok alice\n")
    assert lines[-1] == "ok alice"
    assert len(lines) == 2


def test_filter_out_user_removes_every_line_of_user():
    kept = filter_out_user(LINES, "alice")
    assert "s3cret alice" not in kept
    assert "other alice" not in kept
    assert "hunter2 bob" in kept


def test_filter_out_user_matches_trailing_token_only():
    kept = filter_out_user(LINES, "bob")
    # "pw alice bob" ends in bob, "hunter2 bob" too
    assert kept.count("hunter2 bob") == 0
    assert "pw alice bob" not in kept
    # "malice" is not "alice"
    assert "pw2 malice" in filter_out_user(LINES, "alice")


def test_filter_out_user_is_case_sensitive():
    assert "s3cret alice" in filter_out_user(LINES, "Alice")


def test_filter_out_user_empty_username_is_noop():
    assert filter_out_user(LINES, "") == LINES


@pytest.mark.parametrize("username", ["alice", "bob", "malice", "nobody", ""])
def test_filter_out_user_is_idempotent(username):
    once = filter_out_user(LINES, username)
    assert filter_out_user(once, username) == once


def test_filter_out_user_removes_whitespace_password_line():
    assert filter_out_user(["    alice", "b1 bob"], "alice") == ["b1 bob"]


def test_filter_out_user_keeps_order():
    assert filter_out_user(LINES, "bob")[:2] == ["s3cret alice", ""]


def test_filter_noise_lines():
    assert filter_noise_lines(LINES) == [
        "s3cret alice", "hunter2 bob", "other alice", "pw alice bob", "pw2 malice",
    ]


def test_filter_noise_lines_keeps_mtime_lookalikes():
    assert filter_noise_lines(["mtime:abc", "mtime:1"]) == ["mtime:abc"]


def test_append_entry():
    assert append_entry(["a alice"], Entry("bob", "b")) == ["a alice", "b bob"]


def test_append_cleared_entry_is_stripped_as_noise():
    lines = append_entry(["a alice"], Entry("bob"))
    assert len(lines) == 2
    assert filter_noise_lines(lines) == ["a alice"]


def test_stamp_appends_one_mtime_line():
    lines = stamp(["a alice"], now=1700000123)
    assert lines == ["a alice", "mtime:1700000123"]


def test_stamp_defaults_to_now():
    before = pendulum.now().int_timestamp
    line = stamp([])[-1]
    assert re.fullmatch(r"mtime:\d+", line)
    assert int(line.split(":")[1]) >= before


def test_render():
    assert render(["a alice", "mtime:1"]) == b"a alice\nmtime:1\n"


def test_select_user():
    assert select_user(LINES, "alice") == ["s3cret alice", "other alice"]


@pytest.mark.parametrize("username", ["", "all"])
def test_select_all_skips_metadata_and_blanks(username):
    assert select_user(LINES, username) == [
        "s3cret alice", "hunter2 bob", "other alice", "pw alice bob", "pw2 malice",
    ]


def test_select_unknown_user():
    assert select_user(LINES, "carol") == []


def test_safe_mtime():
    assert safe_mtime(LINES).int_timestamp == 1700000000


def test_safe_mtime_missing():
    assert safe_mtime(["a alice"]) is None
