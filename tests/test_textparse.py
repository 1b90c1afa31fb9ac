import pytest

from cubraycast.textparse import atoi, split


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        ("  -42abc", -42),
        (" \t\n+17", 17),
        ("12 34", 12),
        ("-0", 0),
        ("abc", 0),
        ("--5", 0),
        ("", 0),
    ],
)
def test_atoi(text, expected):
    assert atoi(text) == expected


def test_atoi_whitespace_after_sign_stops_parsing():
    assert atoi("- 5") == 0


def test_split_drops_empty_words():
    assert split("a,,b,", ",") == ["a", "b"]


def test_split_on_spaces():
    assert split("  NO   ./north.xpm\n", " ") == ["NO", "./north.xpm\n"]


def test_split_only_separators():
    assert split(",,,", ",") == []


def test_split_rejoin_invariant():
    text = "220,100,0"
    assert ",".join(split(text, ",")) == text