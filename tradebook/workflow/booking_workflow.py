"""Durable workflows for trade booking and status changes.

Determinism contract: this module contains NO I/O, NO randomness and NO
system clock access. All external interaction is delegated to
BookingActivities.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from tradebook.workflow.activities import BookingActivities
    from tradebook.workflow.types import (
        BookingOutcome,
        BookTradeInput,
        CancelTradeInput,
        StatusUpdateInput,
    )

ACTIVITY_TIMEOUT: timedelta = timedelta(seconds=30)

BOOKING_RETRY = RetryPolicy(
    initial_interval=timedelta(seconds=2),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=10),
    maximum_attempts=3,
    non_retryable_error_types=["ValidationError", "NotFoundError"],
)


@workflow.defn(name="TradeBooking")
class TradeBookingWorkflow:
    """Book one trade. The booking reference makes a natural workflow id."""

    def __init__(self) -> None:
        self._phase: str = "RECEIVED"

    @workflow.query
    def get_phase(self) -> str:
        return self._phase

    @workflow.run
    async def run(self, inp: BookTradeInput) -> BookingOutcome:
        self._phase = "BOOKING"
        outcome = await workflow.execute_activity_method(
            BookingActivities.book_trade,
            inp,
            start_to_close_timeout=ACTIVITY_TIMEOUT,
            retry_policy=BOOKING_RETRY,
        )
        self._phase = "BOOKED" if outcome.success else "REJECTED"
        return outcome


@workflow.defn(name="TradeStatusChange")
class TradeStatusWorkflow:
    """Apply one status change, or a cancellation when inp.cancel is set."""

    def __init__(self) -> None:
        self._phase: str = "RECEIVED"

    @workflow.query
    def get_phase(self) -> str:
        return self._phase

    @workflow.run
    async def run(self, inp: StatusUpdateInput) -> BookingOutcome:
        self._phase = "APPLYING"
        if inp.cancel:
            outcome = await workflow.execute_activity_method(
                BookingActivities.cancel_trade,
                CancelTradeInput(trade_id=inp.trade_id),
                start_to_close_timeout=ACTIVITY_TIMEOUT,
                retry_policy=BOOKING_RETRY,
            )
        else:
            outcome = await workflow.execute_activity_method(
                BookingActivities.update_trade_status,
                inp,
                start_to_close_timeout=ACTIVITY_TIMEOUT,
                retry_policy=BOOKING_RETRY,
            )
        self._phase = "APPLIED" if outcome.success else "REJECTED"
        return outcome
