import pytest
from hypothesis import assume, given, strategies as st

from musiclib.domain.catalog.pagination import (
    MAX_QUERY_INT,
    PageWindow,
    paginate,
    parse_query_int,
    parse_window,
)
from musiclib.errors import InvalidArgument, OutOfRange


@pytest.mark.unit
def test_paginate_clamps_end_to_total():
    assert paginate(total_length=5, offset=3, limit=10) == PageWindow(start=3, end=5, has_more=False)


@pytest.mark.unit
def test_paginate_reports_more_when_window_ends_early():
    window = paginate(total_length=10, offset=2, limit=3)
    assert (window.start, window.end, window.has_more) == (2, 5, True)
    assert window.slice(list(range(10))) == [2, 3, 4]


@pytest.mark.unit
def test_paginate_zero_limit_is_empty_page():
    window = paginate(total_length=4, offset=1, limit=0)
    assert window.size == 0
    assert window.has_more is True


@pytest.mark.unit
def test_paginate_empty_sequence_offset_zero_is_empty_page():
    assert paginate(total_length=0, offset=0, limit=10) == PageWindow(0, 0, False)


@pytest.mark.unit
@pytest.mark.parametrize("total,offset", [(0, 1), (3, 3), (3, 7)])
def test_paginate_offset_past_end_is_out_of_range(total, offset):
    with pytest.raises(OutOfRange):
        paginate(total_length=total, offset=offset, limit=1)


@pytest.mark.unit
@pytest.mark.parametrize("offset,limit", [(-1, 1), (0, -1)])
def test_paginate_rejects_negative_values(offset, limit):
    with pytest.raises(InvalidArgument):
        paginate(total_length=3, offset=offset, limit=limit)


@pytest.mark.unit
def test_out_of_range_is_an_invalid_argument():
    assert issubclass(OutOfRange, InvalidArgument)
    assert OutOfRange.status_code == 400


@pytest.mark.unit
@given(
    total=st.integers(min_value=0, max_value=500),
    offset=st.integers(min_value=0, max_value=500),
    limit=st.integers(min_value=0, max_value=500),
)
def test_paginate_window_size_property(total, offset, limit):
    assume(offset < total or offset == 0)
    window = paginate(total, offset, limit)
    assert window.start == offset
    assert window.end - window.start == min(limit, max(total - offset, 0))
    assert window.has_more == (window.end < total)


@pytest.mark.unit
def test_parse_window_applies_defaults():
    assert parse_window(None, None, default_limit=10) == (10, 0)
    assert parse_window("", "  ", default_limit=7) == (7, 0)


@pytest.mark.unit
def test_parse_window_keeps_large_limits():
    assert parse_window("1000", "5") == (1000, 5)
    assert parse_window(str(MAX_QUERY_INT), "0") == (MAX_QUERY_INT, 0)


@pytest.mark.unit
@pytest.mark.parametrize(
    "limit,offset",
    [
        ("abc", "0"),
        ("10", "x"),
        ("-1", "0"),
        ("5", "-2"),
        ("1.5", "0"),
        ("99999999999999999999", "0"),
        ("10", "99999999999999999999"),
        ("1_0", "0"),
        ("+5", "0"),
        ("١", "0"),
    ],
)
def test_parse_window_rejects_bad_values(limit, offset):
    with pytest.raises(InvalidArgument):
        parse_window(limit, offset)


@pytest.mark.unit
@pytest.mark.parametrize("raw,expected", [("42", 42), (" 7 ", 7), ("-3", -3), ("007", 7)])
def test_parse_query_int_accepts_plain_decimals(raw, expected):
    assert parse_query_int(raw, "bad") == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [str(MAX_QUERY_INT + 1), str(-MAX_QUERY_INT - 2), "1_000", "+1", "0x10", "１", "", "-"],
)
def test_parse_query_int_rejects_everything_else(raw):
    with pytest.raises(InvalidArgument) as excinfo:
        parse_query_int(raw, "Invalid song ID")
    assert excinfo.value.message == "Invalid song ID"
