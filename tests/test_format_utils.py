"""Tests for formatting helpers."""

import datetime

import pytest

from dashboard.utils.format_utils import (
    format_currency,
    generate_pagination,
    generate_y_axis,
)
from utils.time_utils import format_date_to_local


@pytest.mark.parametrize("cents, expected", [
    (0, "$0.00"),
    (666, "$6.66"),
    (15795, "$157.95"),
    (123456789, "$1,234,567.89"),
    (None, "$0.00"),
    (-500, "-$5.00"),
])
def test_format_currency(cents, expected):
    assert format_currency(cents) == expected


class TestPagination:
    def test_few_pages_lists_all(self):
        assert generate_pagination(1, 5) == [1, 2, 3, 4, 5]
        assert generate_pagination(1, 0) == []

    def test_near_start(self):
        assert generate_pagination(2, 10) == [1, 2, 3, "...", 9, 10]

    def test_near_end(self):
        assert generate_pagination(9, 10) == [1, 2, "...", 8, 9, 10]

    def test_middle(self):
        assert generate_pagination(5, 10) == [1, "...", 4, 5, 6, "...", 10]


class TestYAxis:
    def test_rounds_top_up_to_thousand(self):
        labels, top = generate_y_axis([{"month": "Jan", "revenue": 2000}, {"month": "Dec", "revenue": 4800}])
        assert top == 5000
        assert labels == ["$5K", "$4K", "$3K", "$2K", "$1K", "$0K"]

    def test_empty(self):
        assert generate_y_axis([]) == (["$0K"], 0)


class TestDateToLocal:
    def test_from_string(self):
        assert format_date_to_local("2022-12-06") == "Dec 6, 2022"

    def test_from_date(self):
        assert format_date_to_local(datetime.date(2023, 6, 27)) == "Jun 27, 2023"

    def test_unsupported_locale(self):
        with pytest.raises(ValueError):
            format_date_to_local("2022-12-06", locale="fr-FR")
