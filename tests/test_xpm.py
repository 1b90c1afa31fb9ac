import pytest

from cubraycast.xpm import (
    XpmError,
    XpmImage,
    load_xpm,
    parse_color,
    parse_xpm_lines,
    parse_xpm_text,
    split_words,
    strip_comments,
)

SAMPLE = """/* XPM */
static char *img[] = {
/* columns rows colors chars-per-pixel */
"2 2 3 1 ",
"a c #FF0000",
"b c blue",
"  c None",
"ab",
"b ",
};
"""


@pytest.fixture
def image():
    return parse_xpm_text(SAMPLE)


def test_dimensions(image):
    assert (image.width, image.height) == (2, 2)


def test_pixels(image):
    assert image.pixel(0, 0) == 0xFF0000
    assert image.pixel(1, 0) == 0xFF
    assert image.pixel(0, 1) == 0xFF
    assert image.pixel(1, 1) == 0xFF000000


def test_pixel_out_of_range(image):
    with pytest.raises(IndexError):
        image.pixel(2, 0)


def test_load_round_trip(tmp_path, image):
    path = tmp_path / "img.xpm"
    path.write_text(SAMPLE)
    assert load_xpm(path) == image


def test_load_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")


def test_two_chars_per_pixel():
    img = parse_xpm_lines(["1 1 1 2", "ab c red", "ab"])
    assert img.pixel(0, 0) == 0xFF0000


def test_duplicate_key_short_codes_last_wins():
    img = parse_xpm_lines(["1 1 2 1", "a c red", "a c blue", "a"])
    assert img.pixel(0, 0) == 0xFF


def test_duplicate_key_long_codes_first_wins():
    img = parse_xpm_lines(["1 1 2 3", "abc c red", "abc c blue", "abc"])
    assert img.pixel(0, 0) == 0xFF0000


def test_returns_image_object():
    img = parse_xpm_lines(["1 1 1 1", "x c white", "x"])
    assert img == XpmImage(1, 1, ((0xFFFFFF,),))


@pytest.mark.parametrize(
    "lines",
    [
        ["0 2 1 1", "a c red", "a", "a"],
        ["1 1 1"],
        ["1 1 1 1", "a m red", "a"],
        ["1 1 1 1", "a c", "a"],
        ["1 2 1 1", "a c red", "a"],
        ["2 1 1 1", "a c red", "a"],
        [],
    ],
)
def test_malformed(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)


def test_split_words():
    assert split_words("a\tb  c") == ["a", "b", "c"]


def test_strip_comments_preserves_length():
    text = "x/*y*/z"
    out = strip_comments(text)
    assert len(out) == len(text)
    assert out.replace(" ", "") == "xz"


def test_strip_comments_keeps_quoted():
    text = '"a/*b*/"'
    assert strip_comments(text) == text


def test_strip_line_comment():
    out = strip_comments('"a" // note\n"b"')
    assert "note" not in out
    assert out.count('"') == 4


@pytest.mark.parametrize(
    "name, end, expected",
    [
        ("#00ff00", None, 0x00FF00),
        ("light", "blue", 0xADD8E6),
        ("RED", None, 0xFF0000),
        ("None", None, -1),
        ("nosuch", None, 0),
    ],
)
def test_parse_color(name, end, expected):
    assert parse_color(name, end) == expected