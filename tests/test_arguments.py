import math
import sys

import pytest

from wikipedia_mcp.tools.arguments import parse_limit


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 50),
        (True, 50),
        (False, 50),
        (0, 0),
        (-5, -5),
        (120, 120),
        (12.9, 12),
        (-1.5, -1),
        (math.inf, 50),
        (math.nan, 50),
        ("75", 75),
        ("  75", 75),
        ("+8", 8),
        ("-3", -3),
        ("12abc", 12),
        ("3.9", 3),
        ("abc", 50),
        ("", 50),
        ("   ", 50),
        ([10], 50),
        ({"limit": 10}, 50),
    ],
)
def test_parse_limit(value: object, expected: int) -> None:
    assert parse_limit(value) == expected


def test_huge_numeric_string_is_kept() -> None:
    assert parse_limit("9" * 400) == int("9" * 400)


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no int conversion digit limit")
def test_numeric_string_beyond_conversion_limit_falls_back_to_default() -> None:
    assert parse_limit("9" * (sys.get_int_max_str_digits() + 1)) == 50
