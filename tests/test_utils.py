import os
import pytest

from ffedit import utils


def test_normalize_path():
    assert utils.normalize_path(None) == ""
    assert utils.normalize_path("a/b.mp4") == "a/b.mp4"
    assert utils.normalize_path(["a", "b.mp4"]) == os.path.join("a", "b.mp4")
    assert utils.normalize_path([]) == ""


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("12:03:45", 12 * 3600 + 3 * 60 + 45),
        ("23.189", 23.189),
        ("-00:01.5", -1.5),
        ("200ms", 0.2),
        ("200000us", 0.2),
        ("5s", 5),
        (3.5, 3.5),
    ],
)
def test_parse_time_duration(expr, expected):
    assert utils.parse_time_duration(expr) == pytest.approx(expected)


def test_parse_time_duration_invalid():
    with pytest.raises(ValueError):
        utils.parse_time_duration("t+1")


def test_escape_filter_value():
    assert utils.escape_filter_value("Hello World") == "Hello World"
    assert utils.escape_filter_value("a:b") == r"'a\:b'"
    assert utils.escape_filter_value("d'Amour") == r"'d\'\''Amour'"
    assert utils.escape_filter_value("x,y") == "'x,y'"
    assert utils.escape_filter_value(r"c:\foo") == r"'c\:\\foo'"


def test_format_number():
    assert utils.format_number(2.0) == "2"
    assert utils.format_number(2.5) == "2.5"
    assert utils.format_number(-3) == "-3"
