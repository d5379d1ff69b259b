"""Tests for tradebook.booking.counterparties."""

from __future__ import annotations

import logging

import pytest
from conftest import CLOCK, INACTIVE_CP_ID, seeded_counterparties
from hypothesis import given
from hypothesis import strategies as st

from tradebook.booking.counterparties import (
    INVESTMENT_GRADE_RATINGS,
    SUB_INVESTMENT_GRADE_RATINGS,
    CounterpartyService,
    assess_credit_rating,
    validate_counterparty_request,
)
from tradebook.core.errors import NotFoundError
from tradebook.core.result import Err, Ok, unwrap
from tradebook.infra.memory_adapter import InMemoryCounterpartyRepository
from tradebook.instrument.trade import CounterpartyRequest

LEI_CODE = "5493001KJTIIGC8Y1R12"


def _request(**overrides: object) -> CounterpartyRequest:
    fields: dict[str, object] = {
        "counterparty_code": "GSBANK",
        "name": "Golden Sands Bank",
        "lei_code": LEI_CODE,
        "swift_code": "GSBKUS33",
        "credit_rating": "A+",
    }
    return CounterpartyRequest(**{**fields, **overrides})  # type: ignore[arg-type]


def _message(request: CounterpartyRequest) -> str:
    result = validate_counterparty_request(request)
    assert isinstance(result, Err)
    return result.error.message


@pytest.fixture
def registry() -> CounterpartyService:
    return CounterpartyService(InMemoryCounterpartyRepository(), clock=CLOCK)


class TestRequestValidation:
    def test_identifiers_normalised(self) -> None:
        valid = unwrap(validate_counterparty_request(_request(
            counterparty_code=" gsbank ", lei_code=LEI_CODE.lower(), swift_code="gsbkus33xxx",
            credit_rating="bbb-",
        )))
        assert valid.counterparty_code == "GSBANK"
        assert valid.lei_code == LEI_CODE
        assert valid.swift_code == "GSBKUS33XXX"
        assert valid.credit_rating == "BBB-"

    def test_optional_identifiers(self) -> None:
        valid = unwrap(validate_counterparty_request(
            _request(lei_code=None, swift_code="  ", credit_rating=None),
        ))
        assert valid.lei_code is None and valid.swift_code is None

    def test_code_required(self) -> None:
        assert _message(_request(counterparty_code="")) == "Counterparty code is required"

    def test_code_format(self) -> None:
        assert _message(_request(counterparty_code="G$")) == (
            "Counterparty code must be 3-10 alphanumeric characters"
        )

    def test_name_required(self) -> None:
        assert _message(_request(name=None)) == "Counterparty name is required"

    def test_name_length(self) -> None:
        assert _message(_request(name="N" * 101)) == (
            "Counterparty name cannot exceed 100 characters"
        )

    def test_lei_format(self) -> None:
        assert _message(_request(lei_code="SHORT")) == (
            "Invalid LEI code format. LEI must be 20 alphanumeric characters"
        )

    def test_swift_format(self) -> None:
        assert _message(_request(swift_code="1234")) == (
            "Invalid SWIFT code format. SWIFT code must be 8 or 11 characters"
        )

    def test_rating_length(self) -> None:
        assert _message(_request(credit_rating="VERY-GOOD-1")) == (
            "Credit rating cannot exceed 10 characters"
        )

    @given(st.from_regex(r"[A-Z0-9]{3,10}", fullmatch=True))
    def test_any_well_formed_code_accepted(self, code: str) -> None:
        assert isinstance(
            validate_counterparty_request(_request(counterparty_code=code)), Ok,
        )


class TestCreditRating:
    @pytest.mark.parametrize("rating", INVESTMENT_GRADE_RATINGS)
    def test_investment_grade_is_quiet(self, rating: str) -> None:
        assert assess_credit_rating(rating) == ()

    @pytest.mark.parametrize("rating", SUB_INVESTMENT_GRADE_RATINGS)
    def test_sub_investment_grade(self, rating: str) -> None:
        (advisory,) = assess_credit_rating(rating.lower())
        assert advisory.message == f"Sub-investment-grade counterparty rating: {rating}"

    def test_non_standard(self) -> None:
        (advisory,) = assess_credit_rating("Z9")
        assert advisory.message == "Non-standard credit rating: Z9"


class TestRegister:
    def test_register(self, registry: CounterpartyService) -> None:
        saved = unwrap(registry.register(_request()))
        assert saved.counterparty_id == 1
        assert saved.is_active
        assert saved.created_at == CLOCK()

    def test_register_inactive(self, registry: CounterpartyService) -> None:
        assert not unwrap(registry.register(_request(is_active=False))).is_active

    def test_duplicate_code(self, registry: CounterpartyService) -> None:
        unwrap(registry.register(_request()))
        result = registry.register(_request(lei_code=None, counterparty_code="gsbank"))
        assert isinstance(result, Err)
        assert result.error.message == "Counterparty code already exists: GSBANK"

    def test_duplicate_lei(self, registry: CounterpartyService) -> None:
        unwrap(registry.register(_request()))
        result = registry.register(_request(counterparty_code="OTHER"))
        assert isinstance(result, Err)
        assert result.error.message == f"LEI code already exists: {LEI_CODE}"

    def test_weak_rating_logged(
        self, registry: CounterpartyService, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING):
            unwrap(registry.register(_request(credit_rating="CCC")))
        assert "Sub-investment-grade counterparty rating: CCC" in caplog.text


class TestLookupAndDeactivate:
    def test_get_and_by_code(self) -> None:
        service = CounterpartyService(seeded_counterparties(), clock=CLOCK)
        assert unwrap(service.get(1)).counterparty_code == "ACME"
        assert unwrap(service.get_by_code("dormant")).counterparty_id == INACTIVE_CP_ID

    def test_get_missing(self, registry: CounterpartyService) -> None:
        result = registry.get(5)
        assert isinstance(result, Err)
        assert isinstance(result.error, NotFoundError)
        assert result.error.message == "Counterparty not found with ID: 5"

    def test_by_code_missing(self, registry: CounterpartyService) -> None:
        result = registry.get_by_code("nobody")
        assert isinstance(result, Err)
        assert result.error.message == "Counterparty not found with code: NOBODY"

    def test_list_active(self) -> None:
        service = CounterpartyService(seeded_counterparties(), clock=CLOCK)
        assert [c.counterparty_code for c in unwrap(service.list_active())] == ["ACME"]

    def test_deactivate(self) -> None:
        service = CounterpartyService(seeded_counterparties(), clock=CLOCK)
        assert not unwrap(service.deactivate(1)).is_active
        assert unwrap(service.list_active()) == ()

    def test_deactivate_twice(self) -> None:
        service = CounterpartyService(seeded_counterparties(), clock=CLOCK)
        result = service.deactivate(INACTIVE_CP_ID)
        assert isinstance(result, Err)
        assert result.error.message == "Counterparty is already inactive"
