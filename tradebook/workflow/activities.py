"""Activity implementations for the booking workflows.

Activities are thin IO wrappers around TradeBookingService. All domain
logic lives in the library layer.

Each activity:
- Is a method of BookingActivities, bound to one service instance
- Takes a single frozen-dataclass input
- Returns a BookingOutcome
- Is synchronous: repository calls may block, so the worker runs
  activities on a thread pool

Rejections (ValidationError, NotFoundError) come back as a failed
BookingOutcome and are never retried. An InternalError is raised as a
retryable ApplicationError so Temporal tries again.
"""

from __future__ import annotations

from temporalio import activity
from temporalio.exceptions import ApplicationError

from tradebook.booking.service import TradeBookingService
from tradebook.core.errors import InternalError, UserFacingError
from tradebook.core.result import Err, Ok
from tradebook.gateway.parser import parse_booking_request, parse_enum
from tradebook.instrument.trade import Trade
from tradebook.instrument.types import TradeStatus
from tradebook.workflow.types import (
    BookingOutcome,
    BookTradeInput,
    CancelTradeInput,
    StatusUpdateInput,
)


def _trade_outcome(trade: Trade, message: str) -> BookingOutcome:
    return BookingOutcome(
        success=True,
        message=message,
        trade_id=trade.trade_id,
        trade_reference=trade.trade_reference,
        status=trade.status.value,
    )


def _failed(error: UserFacingError, *, trade_id: int | None = None) -> BookingOutcome:
    if isinstance(error, InternalError):
        raise ApplicationError(error.message, error.cause, type="InternalError")
    activity.logger.info("Rejected: %s", error.message)
    return BookingOutcome(
        success=False, message=error.message, trade_id=trade_id, error_code=error.code,
    )


class BookingActivities:
    """Activities sharing one TradeBookingService."""

    def __init__(self, service: TradeBookingService) -> None:
        self._service = service

    @activity.defn(name="book_trade")
    def book_trade(self, inp: BookTradeInput) -> BookingOutcome:
        """Parse and book a trade.

        Timeout: 30s | Retries: 3 on InternalError only
        Idempotent: a replayed booking fails the reference uniqueness rule
        """
        match parse_booking_request(inp.request):
            case Err(error):
                return _failed(error)
            case Ok(request):
                pass
        activity.logger.info("Booking trade %s", request.trade_reference)
        match self._service.book_trade(request):
            case Err(error):
                return _failed(error)
            case Ok(trade):
                return _trade_outcome(trade, "Trade booked successfully")

    @activity.defn(name="update_trade_status")
    def update_trade_status(self, inp: StatusUpdateInput) -> BookingOutcome:
        new_status = parse_enum(TradeStatus, inp.new_status)
        if new_status is None:
            return BookingOutcome(
                success=False,
                message=f"Unsupported status: {inp.new_status}",
                trade_id=inp.trade_id,
                error_code="PARSE",
            )
        activity.logger.info("Updating trade %s to %s", inp.trade_id, new_status.value)
        match self._service.update_status(inp.trade_id, new_status):
            case Err(error):
                return _failed(error, trade_id=inp.trade_id)
            case Ok(trade):
                return _trade_outcome(trade, "Trade status updated successfully")

    @activity.defn(name="cancel_trade")
    def cancel_trade(self, inp: CancelTradeInput) -> BookingOutcome:
        activity.logger.info("Cancelling trade %s", inp.trade_id)
        match self._service.cancel_trade(inp.trade_id):
            case Err(error):
                return _failed(error, trade_id=inp.trade_id)
            case Ok():
                return BookingOutcome(
                    success=True,
                    message="Trade cancelled successfully",
                    trade_id=inp.trade_id,
                    status=TradeStatus.CANCELLED.value,
                )
