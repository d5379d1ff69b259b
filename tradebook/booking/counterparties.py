"""Counterparty registration and maintenance.

Identifiers are normalised (stripped, upper-cased) before validation and
storage. Code and LEI are unique; the pre-checks here give readable
messages and the repository constraint backs them up.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import final

from tradebook.booking.service import storage_failure
from tradebook.core.errors import UserFacingError, ValidationError, not_found, validation_error
from tradebook.core.identifiers import BIC, LEI, CounterpartyCode
from tradebook.core.result import Err, Ok
from tradebook.core.types import Clock, UtcDatetime
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.infra.protocols import (
    COUNTERPARTY_CODE_CONSTRAINT,
    COUNTERPARTY_LEI_CONSTRAINT,
    CounterpartyRepository,
)
from tradebook.instrument.trade import Counterparty, CounterpartyRequest
from tradebook.validation.advisories import CREDIT_RATING, Advisory, log_advisories

logger = logging.getLogger(__name__)

_SRC = "booking.counterparties"

INVESTMENT_GRADE_RATINGS: tuple[str, ...] = (
    "AAA", "AA+", "AA", "AA-", "A+", "A", "A-", "BBB+", "BBB", "BBB-",
)
SUB_INVESTMENT_GRADE_RATINGS: tuple[str, ...] = (
    "BB+", "BB", "BB-", "B+", "B", "B-", "CCC+", "CCC", "CCC-", "CC", "C", "D",
)


def assess_credit_rating(rating: str) -> tuple[Advisory, ...]:
    """Advisories for ratings outside the usual investment-grade scale."""
    norm = rating.strip().upper()
    if norm in INVESTMENT_GRADE_RATINGS:
        return ()
    if norm in SUB_INVESTMENT_GRADE_RATINGS:
        return (Advisory(CREDIT_RATING, f"Sub-investment-grade counterparty rating: {norm}"),)
    return (Advisory(CREDIT_RATING, f"Non-standard credit rating: {norm}"),)


def _invalid(message: str, field: str) -> Err[ValidationError]:
    return Err(validation_error(message, f"{_SRC}.register", field=field))


def validate_counterparty_request(
    request: CounterpartyRequest, limits: BookingLimits = DEFAULT_LIMITS,
) -> Ok[CounterpartyRequest] | Err[ValidationError]:
    """Field rules. Returns the request with identifiers normalised."""
    if request.counterparty_code is None or not request.counterparty_code.strip():
        return _invalid("Counterparty code is required", "counterparty_code")
    match CounterpartyCode.parse(request.counterparty_code):
        case Err(msg):
            return _invalid(msg, "counterparty_code")
        case Ok(code):
            pass

    if request.name is None or not request.name.strip():
        return _invalid("Counterparty name is required", "name")
    if len(request.name.strip()) > limits.max_counterparty_name_length:
        return _invalid(
            f"Counterparty name cannot exceed {limits.max_counterparty_name_length} characters",
            "name",
        )

    lei_code: str | None = None
    if request.lei_code is not None and request.lei_code.strip():
        match LEI.parse(request.lei_code):
            case Err(msg):
                return _invalid(msg, "lei_code")
            case Ok(lei):
                lei_code = lei.value

    swift_code: str | None = None
    if request.swift_code is not None and request.swift_code.strip():
        match BIC.parse(request.swift_code):
            case Err(msg):
                return _invalid(msg, "swift_code")
            case Ok(bic):
                swift_code = bic.value

    rating: str | None = None
    if request.credit_rating is not None and request.credit_rating.strip():
        rating = request.credit_rating.strip().upper()
        if len(rating) > limits.max_credit_rating_length:
            return _invalid(
                f"Credit rating cannot exceed {limits.max_credit_rating_length} characters",
                "credit_rating",
            )

    return Ok(replace(
        request,
        counterparty_code=code.value,
        name=request.name.strip(),
        lei_code=lei_code,
        swift_code=swift_code,
        credit_rating=rating,
    ))


@final
class CounterpartyService:
    def __init__(
        self,
        counterparties: CounterpartyRepository,
        *,
        limits: BookingLimits = DEFAULT_LIMITS,
        clock: Clock = UtcDatetime.now,
    ) -> None:
        self._counterparties = counterparties
        self._limits = limits
        self._clock = clock

    def register(self, request: CounterpartyRequest) -> Ok[Counterparty] | Err[UserFacingError]:
        match validate_counterparty_request(request, self._limits):
            case Err() as err:
                logger.info("Counterparty rejected: %s", err.error.message)
                return err
            case Ok(valid):
                pass
        assert valid.counterparty_code is not None and valid.name is not None

        match self._counterparties.find_by_code(valid.counterparty_code):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.register"))
            case Ok(None):
                pass
            case Ok(_):
                return _invalid(
                    f"Counterparty code already exists: {valid.counterparty_code}",
                    "counterparty_code",
                )
        if valid.lei_code is not None:
            match self._counterparties.find_by_lei(valid.lei_code):
                case Err(error):
                    return Err(storage_failure(error, f"{_SRC}.register"))
                case Ok(None):
                    pass
                case Ok(_):
                    return _invalid(f"LEI code already exists: {valid.lei_code}", "lei_code")

        counterparty = Counterparty(
            counterparty_id=None,
            counterparty_code=valid.counterparty_code,
            name=valid.name,
            created_at=self._clock(),
            lei_code=valid.lei_code,
            swift_code=valid.swift_code,
            credit_rating=valid.credit_rating,
            is_active=True if valid.is_active is None else valid.is_active,
        )
        match self._counterparties.save(counterparty):
            case Err(error) if error.constraint == COUNTERPARTY_CODE_CONSTRAINT:
                return _invalid(
                    f"Counterparty code already exists: {counterparty.counterparty_code}",
                    "counterparty_code",
                )
            case Err(error) if error.constraint == COUNTERPARTY_LEI_CONSTRAINT:
                return _invalid(f"LEI code already exists: {counterparty.lei_code}", "lei_code")
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.register"))
            case Ok(saved):
                pass

        if saved.credit_rating is not None:
            log_advisories(saved.counterparty_code, assess_credit_rating(saved.credit_rating))
        logger.info(
            "Counterparty %s registered with id %s", saved.counterparty_code, saved.counterparty_id,
        )
        return Ok(saved)

    def get(self, counterparty_id: int) -> Ok[Counterparty] | Err[UserFacingError]:
        match self._counterparties.find_by_id(counterparty_id):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.get"))
            case Ok(None):
                return Err(not_found("Counterparty", counterparty_id, f"{_SRC}.get"))
            case Ok(counterparty):
                return Ok(counterparty)

    def get_by_code(self, code: str) -> Ok[Counterparty] | Err[UserFacingError]:
        norm = code.strip().upper()
        match self._counterparties.find_by_code(norm):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.get_by_code"))
            case Ok(None):
                return Err(not_found("Counterparty", norm, f"{_SRC}.get_by_code", by="code"))
            case Ok(counterparty):
                return Ok(counterparty)

    def list_active(self) -> Ok[tuple[Counterparty, ...]] | Err[UserFacingError]:
        match self._counterparties.find_all():
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.list_active"))
            case Ok(rows):
                active = (c for c in rows if c.is_active)
                return Ok(tuple(sorted(active, key=lambda c: c.counterparty_code)))

    def deactivate(self, counterparty_id: int) -> Ok[Counterparty] | Err[UserFacingError]:
        match self.get(counterparty_id):
            case Err() as err:
                return err
            case Ok(counterparty):
                pass
        if not counterparty.is_active:
            return Err(validation_error(
                "Counterparty is already inactive", f"{_SRC}.deactivate", field="is_active",
            ))
        match self._counterparties.save(replace(counterparty, is_active=False)):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.deactivate"))
            case Ok(saved):
                logger.info("Counterparty %s deactivated", saved.counterparty_code)
                return Ok(saved)
