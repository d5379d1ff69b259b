"""Tests for tradebook.core.errors -- error value hierarchy."""

from __future__ import annotations

import dataclasses
import json

import pytest

from tradebook.core.errors import (
    BookingError,
    InternalError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    internal_error,
    not_found,
    validation_error,
)
from tradebook.core.types import UtcDatetime


def _base() -> BookingError:
    return BookingError(
        message="base error", code="E001", timestamp=UtcDatetime.now(), source="test.fn",
    )


class TestBookingError:
    def test_is_frozen(self) -> None:
        err = _base()
        with pytest.raises(dataclasses.FrozenInstanceError):
            err.message = "changed"  # type: ignore[misc]

    def test_to_dict_keys(self) -> None:
        assert set(_base().to_dict()) == {"message", "code", "timestamp", "source"}

    def test_to_dict_json_serializable(self) -> None:
        json.dumps(_base().to_dict())

    def test_with_context_prepends(self) -> None:
        assert _base().with_context("trade TRD-1").message == "trade TRD-1: base error"

    def test_with_context_keeps_subclass(self) -> None:
        err = validation_error("bad", "test.fn", field="notional_amount")
        ctx = err.with_context("booking")
        assert isinstance(ctx, ValidationError)
        assert ctx.field == "notional_amount"


class TestSubclasses:
    def test_validation_error_fields(self) -> None:
        err = validation_error("Trade reference is required", "test.fn", field="trade_reference")
        assert err.code == "VALIDATION"
        assert err.to_dict()["field"] == "trade_reference"

    def test_validation_error_custom_code(self) -> None:
        err = validation_error("dup", "test.fn", code="DUPLICATE_REFERENCE")
        assert err.code == "DUPLICATE_REFERENCE"

    def test_not_found_message(self) -> None:
        err = not_found("Trade", 42, "test.fn")
        assert isinstance(err, NotFoundError)
        assert err.message == "Trade not found with ID: 42"
        assert err.key == "42"

    def test_not_found_by_reference(self) -> None:
        err = not_found("Trade", "TRD-9", "test.fn", by="reference")
        assert err.message == "Trade not found with reference: TRD-9"

    def test_internal_error_hides_cause_in_message(self) -> None:
        err = internal_error("disk full", "test.fn")
        assert isinstance(err, InternalError)
        assert "disk full" not in err.message
        assert err.to_dict()["cause"] == "disk full"

    def test_persistence_error_to_dict(self) -> None:
        err = PersistenceError(
            message="dup", code="CONSTRAINT_VIOLATION", timestamp=UtcDatetime.now(),
            source="test.fn", operation="save", constraint="uk_trade_reference",
        )
        d = err.to_dict()
        assert d["operation"] == "save"
        assert d["constraint"] == "uk_trade_reference"
        json.dumps(d)

    def test_all_subclasses_are_booking_errors(self) -> None:
        for cls in (ValidationError, NotFoundError, PersistenceError, InternalError):
            assert issubclass(cls, BookingError)
