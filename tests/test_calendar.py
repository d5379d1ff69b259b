"""Tests for tradebook.core.calendar, money helpers, identifiers and types."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tradebook.core.calendar import (
    add_years,
    days_between,
    exceeds_tenor,
    is_business_day,
)
from tradebook.core.identifiers import BIC, LEI, CounterpartyCode
from tradebook.core.money import (
    fractional_digits,
    is_major_currency,
)
from tradebook.core.result import Err, Ok, unwrap
from tradebook.core.types import UtcDatetime, fixed_clock


class TestBusinessDays:
    def test_weekend(self) -> None:
        assert not is_business_day(date(2026, 3, 7))  # Saturday
        assert not is_business_day(date(2026, 3, 8))
        assert is_business_day(date(2026, 3, 9))


class TestTenor:
    def test_add_years_leap_day(self) -> None:
        assert add_years(date(2028, 2, 29), 1) == date(2029, 2, 28)

    def test_exactly_at_limit_is_not_exceeding(self) -> None:
        assert not exceeds_tenor(date(2026, 3, 4), date(2036, 3, 4), 10)

    def test_one_day_over_exceeds(self) -> None:
        assert exceeds_tenor(date(2026, 3, 4), date(2036, 3, 5), 10)

    def test_days_between(self) -> None:
        assert days_between(date(2026, 3, 4), date(2026, 4, 3)) == 30

    @given(
        st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 1, 1)),
        st.integers(min_value=1, max_value=10),
    )
    def test_tenor_boundary(self, start: date, years: int) -> None:
        limit = add_years(start, years)
        assert not exceeds_tenor(start, limit, years)
        assert exceeds_tenor(start, date.fromordinal(limit.toordinal() + 1), years)


class TestMoney:
    def test_fractional_digits_keeps_scale(self) -> None:
        assert fractional_digits(Decimal("100000.00")) == 2
        assert fractional_digits(Decimal("1.2500")) == 4
        assert fractional_digits(Decimal("100")) == 0
        assert fractional_digits(Decimal("1E+3")) == 0

    def test_major_currency(self) -> None:
        assert is_major_currency("eur")
        assert not is_major_currency("XAU")


class TestIdentifiers:
    def test_lei_valid_normalised(self) -> None:
        assert unwrap(LEI.parse(" 529900t8bm49aursdo55 ")).value == "529900T8BM49AURSDO55"

    def test_lei_wrong_length(self) -> None:
        assert isinstance(LEI.parse("SHORT"), Err)

    @pytest.mark.parametrize("code", ["DEUTDEFF", "DEUTDEFF500", "bofaus3n"])
    def test_bic_valid(self, code: str) -> None:
        assert isinstance(BIC.parse(code), Ok)

    @pytest.mark.parametrize("code", ["DEUT", "DEUTDEFF5", "12UTDEFF"])
    def test_bic_invalid(self, code: str) -> None:
        match BIC.parse(code):
            case Err(msg):
                assert msg == "Invalid SWIFT code format. SWIFT code must be 8 or 11 characters"
            case Ok(_):
                pytest.fail("expected Err")

    def test_counterparty_code_bounds(self) -> None:
        assert isinstance(CounterpartyCode.parse("ab"), Err)
        assert isinstance(CounterpartyCode.parse("ABCDEFGHIJK"), Err)
        assert unwrap(CounterpartyCode.parse("acme1")).value == "ACME1"


class TestUtcDatetime:
    def test_rejects_naive(self) -> None:
        with pytest.raises(TypeError):
            UtcDatetime(value=datetime(2026, 3, 4))

    def test_offset_normalised_to_utc(self) -> None:
        paris = timezone(timedelta(hours=1))
        stamp = UtcDatetime(value=datetime(2026, 3, 4, 11, tzinfo=paris))
        assert stamp.value == datetime(2026, 3, 4, 10, tzinfo=UTC)
        assert stamp.isoformat() == "2026-03-04T10:00:00+00:00"

    def test_fixed_clock(self) -> None:
        clock = fixed_clock(datetime(2026, 3, 4, 9, tzinfo=UTC))
        assert clock() == clock()
        assert clock().date == date(2026, 3, 4)
