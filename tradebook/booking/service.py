"""Trade booking service: book, change status, cancel and amend trades.

Each operation runs to completion or is rejected as a whole; nothing is
written until every rule has passed. The flow for a booking:

    validate_common -> product validator -> counterparty eligibility
    -> reference pre-check -> build_trade -> apply_business_logic
    -> save -> advisories and post-trade flags

Rejections (ValidationError, NotFoundError) are expected and logged at
INFO. Storage failures and unexpected exceptions become InternalError
and are logged at ERROR.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import final

from tradebook.booking.business import (
    StatusHooks,
    apply_business_logic,
    default_hooks,
    post_trade_checks,
)
from tradebook.booking.factory import build_trade
from tradebook.core.errors import (
    InternalError,
    NotFoundError,
    PersistenceError,
    UserFacingError,
    ValidationError,
    internal_error,
    not_found,
    validation_error,
)
from tradebook.core.result import Err, Ok
from tradebook.core.types import Clock, UtcDatetime
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.infra.protocols import (
    TRADE_REFERENCE_CONSTRAINT,
    CounterpartyRepository,
    TradeRepository,
)
from tradebook.instrument.lifecycle import (
    check_amendable,
    check_cancellable,
    check_transition,
)
from tradebook.instrument.trade import Counterparty, Trade, TradeBookingRequest
from tradebook.instrument.types import TradeStatus
from tradebook.validation.advisories import Advisory, log_advisories
from tradebook.validation.common import validate_common
from tradebook.validation.products import PRODUCT_VALIDATORS, ProductValidatorRegistry

logger = logging.getLogger(__name__)

_SRC = "booking.service"


def check_trade_id(trade_id: int | None) -> Ok[int] | Err[ValidationError]:
    if trade_id is None or trade_id <= 0:
        return Err(validation_error(
            "Trade ID must be a positive number", f"{_SRC}.check_trade_id", field="trade_id",
        ))
    return Ok(trade_id)


def load_trade(
    trades: TradeRepository, trade_id: int | None,
) -> Ok[Trade] | Err[UserFacingError]:
    """Fetch a trade by id, mapping absence to NotFoundError."""
    match check_trade_id(trade_id):
        case Err() as err:
            return err
        case Ok(checked):
            pass
    match trades.find_by_id(checked):
        case Err(error):
            return Err(storage_failure(error, f"{_SRC}.load_trade"))
        case Ok(None):
            return Err(not_found("Trade", checked, f"{_SRC}.load_trade"))
        case Ok(trade):
            return Ok(trade)


def storage_failure(error: PersistenceError, source: str) -> InternalError:
    logger.error(
        "Persistence failure in %s (%s): %s", error.operation, source, error.message,
    )
    return internal_error(error.message, source)


@final
class TradeBookingService:
    """Write side of the trade book."""

    def __init__(
        self,
        trades: TradeRepository,
        counterparties: CounterpartyRepository,
        *,
        limits: BookingLimits = DEFAULT_LIMITS,
        clock: Clock = UtcDatetime.now,
        hooks: StatusHooks | None = None,
        validators: ProductValidatorRegistry = PRODUCT_VALIDATORS,
    ) -> None:
        self._trades = trades
        self._counterparties = counterparties
        self._limits = limits
        self._clock = clock
        self._hooks = hooks if hooks is not None else default_hooks()
        self._validators = validators

    # -- validation --

    def validate(
        self, request: TradeBookingRequest,
    ) -> Ok[tuple[Advisory, ...]] | Err[ValidationError]:
        """Common rules then product rules. Pure apart from reading the clock."""
        today = self._clock().date
        match validate_common(request, today, self._limits):
            case Err() as err:
                return err
            case Ok(advisories):
                pass
        match self._validators.validate(request, self._limits):
            case Err() as err:
                return err
            case Ok():
                return Ok(advisories)

    # -- booking --

    def book_trade(self, request: TradeBookingRequest) -> Ok[Trade] | Err[UserFacingError]:
        logger.info("Booking trade %s", request.trade_reference)
        return self._guard("book_trade", lambda: self._book(request))

    def _book(self, request: TradeBookingRequest) -> Ok[Trade] | Err[UserFacingError]:
        match self.validate(request):
            case Err() as err:
                self._log_rejection("Booking", request.trade_reference, err.error)
                return err
            case Ok(advisories):
                pass
        assert request.counterparty_id is not None and request.trade_reference is not None

        match self._eligible_counterparty(request.counterparty_id):
            case Err() as err:
                self._log_rejection("Booking", request.trade_reference, err.error)
                return err
            case Ok(counterparty):
                pass

        reference = request.trade_reference.strip()
        match self._trades.exists_by_reference(reference):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.book_trade"))
            case Ok(True):
                dup = _duplicate_reference(reference)
                self._log_rejection("Booking", reference, dup)
                return Err(dup)
            case Ok(False):
                pass

        trade = apply_business_logic(
            build_trade(request, counterparty, self._clock()), self._limits,
        )
        match self._save(trade):
            case Err() as err:
                return err
            case Ok(saved):
                pass

        log_advisories(saved.trade_reference, advisories)
        post_trade_checks(saved, self._limits)
        logger.info(
            "Trade %s booked with id %s (%s)",
            saved.trade_reference, saved.trade_id, saved.product_type.value,
        )
        return Ok(saved)

    # -- lifecycle --

    def update_status(
        self, trade_id: int, new_status: TradeStatus,
    ) -> Ok[Trade] | Err[UserFacingError]:
        logger.info("Updating trade %s to %s", trade_id, new_status.value)
        return self._guard("update_status", lambda: self._update_status(trade_id, new_status))

    def _update_status(
        self, trade_id: int, new_status: TradeStatus,
    ) -> Ok[Trade] | Err[UserFacingError]:
        match load_trade(self._trades, trade_id):
            case Err() as err:
                return err
            case Ok(trade):
                return self._transition(trade, new_status)

    def cancel_trade(self, trade_id: int) -> Ok[None] | Err[UserFacingError]:
        logger.info("Cancelling trade %s", trade_id)
        return self._guard("cancel_trade", lambda: self._cancel(trade_id))

    def _cancel(self, trade_id: int) -> Ok[None] | Err[UserFacingError]:
        match load_trade(self._trades, trade_id):
            case Err() as err:
                return err
            case Ok(trade):
                pass
        match check_cancellable(trade.status):
            case Err() as err:
                self._log_rejection("Cancellation", trade.trade_reference, err.error)
                return err
            case Ok():
                pass
        match self._transition(trade, TradeStatus.CANCELLED):
            case Err() as err:
                return err
            case Ok():
                return Ok(None)

    def _transition(
        self, trade: Trade, new_status: TradeStatus,
    ) -> Ok[Trade] | Err[UserFacingError]:
        match check_transition(trade.status, new_status):
            case Err() as err:
                self._log_rejection("Status change", trade.trade_reference, err.error)
                return err
            case Ok():
                pass
        updated = replace(trade, status=new_status, updated_at=self._clock())
        # Hooks run before the write; a raising hook leaves the stored trade untouched.
        self._hooks.fire(updated)
        match self._save(updated):
            case Err() as err:
                return err
            case Ok(saved):
                pass
        logger.info(
            "Trade %s moved %s -> %s",
            saved.trade_reference, trade.status.value, saved.status.value,
        )
        return Ok(saved)

    # -- amendment --

    def amend_trade(
        self, trade_id: int, request: TradeBookingRequest,
    ) -> Ok[Trade] | Err[UserFacingError]:
        logger.info("Amending trade %s", trade_id)
        return self._guard("amend_trade", lambda: self._amend(trade_id, request))

    def _amend(
        self, trade_id: int, request: TradeBookingRequest,
    ) -> Ok[Trade] | Err[UserFacingError]:
        match load_trade(self._trades, trade_id):
            case Err() as err:
                return err
            case Ok(existing):
                pass
        match check_amendable(existing.status):
            case Err() as err:
                self._log_rejection("Amendment", existing.trade_reference, err.error)
                return err
            case Ok():
                pass
        match self.validate(request):
            case Err() as err:
                self._log_rejection("Amendment", existing.trade_reference, err.error)
                return err
            case Ok(advisories):
                pass
        assert request.trade_reference is not None and request.counterparty_id is not None
        if request.trade_reference.strip() != existing.trade_reference:
            return Err(validation_error(
                "Trade reference cannot be changed", f"{_SRC}.amend_trade",
                field="trade_reference",
            ))
        if request.counterparty_id != existing.counterparty_id:
            return Err(validation_error(
                "Counterparty cannot be changed", f"{_SRC}.amend_trade",
                field="counterparty_id",
            ))
        match self._eligible_counterparty(request.counterparty_id):
            case Err() as err:
                return err
            case Ok(counterparty):
                pass

        rebuilt = apply_business_logic(
            build_trade(request, counterparty, self._clock()), self._limits,
        )
        amended = replace(
            rebuilt,
            trade_id=existing.trade_id,
            status=existing.status,
            created_at=existing.created_at,
            created_by=existing.created_by,
        )
        match self._save(amended):
            case Err() as err:
                return err
            case Ok(saved):
                pass
        log_advisories(saved.trade_reference, advisories)
        logger.info("Trade %s amended", saved.trade_reference)
        return Ok(saved)

    # -- helpers --

    def _eligible_counterparty(
        self, counterparty_id: int,
    ) -> Ok[Counterparty] | Err[UserFacingError]:
        match self._counterparties.find_by_id(counterparty_id):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.counterparty"))
            case Ok(None):
                return Err(not_found("Counterparty", counterparty_id, f"{_SRC}.counterparty"))
            case Ok(counterparty):
                pass
        if not counterparty.is_active:
            return Err(validation_error(
                f"Cannot trade with inactive counterparty: {counterparty.name}",
                f"{_SRC}.counterparty",
                field="counterparty_id",
            ))
        return Ok(counterparty)

    def _save(self, trade: Trade) -> Ok[Trade] | Err[UserFacingError]:
        match self._trades.save(trade):
            case Err(error) if error.constraint == TRADE_REFERENCE_CONSTRAINT:
                # lost the race against a concurrent booking
                dup = _duplicate_reference(trade.trade_reference)
                self._log_rejection("Save", trade.trade_reference, dup)
                return Err(dup)
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.save"))
            case Ok(saved):
                return Ok(saved)

    def _guard[T](
        self, operation: str, body: Callable[[], Ok[T] | Err[UserFacingError]],
    ) -> Ok[T] | Err[UserFacingError]:
        try:
            return body()
        except Exception as exc:
            logger.exception("Unexpected failure in %s", operation)
            return Err(internal_error(repr(exc), f"{_SRC}.{operation}"))

    @staticmethod
    def _log_rejection(
        what: str, reference: str | None, error: ValidationError | NotFoundError,
    ) -> None:
        logger.info("%s rejected for %s: %s", what, reference or "-", error.message)


def _duplicate_reference(reference: str) -> ValidationError:
    return validation_error(
        f"Trade reference already exists: {reference}",
        f"{_SRC}.book_trade",
        field="trade_reference",
        code="DUPLICATE_REFERENCE",
    )
