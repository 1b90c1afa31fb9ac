import pytest

from cubraycast.colornames import lookup_color


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("red", 0xFF0000),
        ("black", 0x0),
        ("white", 0xFFFFFF),
        ("navy", 0x80),
        ("none", -1),
    ],
)
def test_known_names(name, expected):
    assert lookup_color(name) == expected


@pytest.mark.parametrize("name", ["RED", "Red", "rEd"])
def test_lookup_ignores_case(name):
    assert lookup_color(name) == lookup_color("red")


def test_unknown_name_gives_none():
    assert lookup_color("not a colour at all") is None


def test_empty_name_gives_none():
    assert lookup_color("") is None


def test_first_duplicate_wins():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == 0x778899
    assert lookup_color("light goldenrod") == 0xFAFAD2


@pytest.mark.parametrize("level", range(101))
def test_gray_and_grey_agree(level):
    gray = lookup_color(f"gray{level}")
    assert gray is not None
    assert gray == lookup_color(f"grey{level}")


def test_gray_ramp_is_monotonic():
    values = [lookup_color(f"gray{level}") for level in range(101)]
    assert values == sorted(values)
    assert values[0] == lookup_color("black")
    assert values[-1] == lookup_color("white")


@pytest.mark.parametrize(
    ("spaced", "compact"),
    [
        ("ghost white", "ghostwhite"),
        ("midnight blue", "midnightblue"),
        ("orange red", "orangered"),
        ("light green", "lightgreen"),
    ],
)
def test_spaced_and_compact_names_match(spaced, compact):
    assert lookup_color(spaced) == lookup_color(compact)


def test_numbered_variant_one_matches_base():
    assert lookup_color("red1") == lookup_color("red")
    assert lookup_color("snow1") == lookup_color("snow")


def test_values_fit_in_24_bits_except_none():
    for name in ("snow", "thistle4", "lightgreen", "darkred", "gold"):
        value = lookup_color(name)
        assert 0 <= value <= 0xFFFFFF