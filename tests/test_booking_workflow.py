"""End-to-end tests for the booking workflows in a time-skipping Temporal environment."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from conftest import CLOCK, seeded_counterparties, vanilla_request
from temporalio.testing import WorkflowEnvironment

from tradebook.booking.service import TradeBookingService
from tradebook.gateway.parser import request_to_dict
from tradebook.infra.config import TemporalConfig
from tradebook.infra.memory_adapter import InMemoryTradeRepository
from tradebook.workflow.booking_workflow import TradeBookingWorkflow, TradeStatusWorkflow
from tradebook.workflow.types import BookTradeInput, StatusUpdateInput
from tradebook.workflow.worker import build_worker

CONFIG = TemporalConfig(task_queue="trade-booking-test")


def _service() -> TradeBookingService:
    return TradeBookingService(InMemoryTradeRepository(), seeded_counterparties(), clock=CLOCK)


@pytest.mark.asyncio
async def test_book_then_confirm_then_cancel_attempt() -> None:
    async with await WorkflowEnvironment.start_time_skipping() as env:
        with ThreadPoolExecutor(max_workers=CONFIG.activity_threads) as executor:
            async with build_worker(env.client, CONFIG, _service(), executor):
                booked = await env.client.execute_workflow(
                    TradeBookingWorkflow.run,
                    BookTradeInput(request=request_to_dict(vanilla_request())),
                    id="book-TRD-001",
                    task_queue=CONFIG.task_queue,
                )
                assert booked.success
                assert booked.status == "PENDING"
                assert booked.trade_id == 1

                confirmed = await env.client.execute_workflow(
                    TradeStatusWorkflow.run,
                    StatusUpdateInput(trade_id=1, new_status="CONFIRMED"),
                    id="status-1-confirm",
                    task_queue=CONFIG.task_queue,
                )
                assert confirmed.status == "CONFIRMED"

                refused = await env.client.execute_workflow(
                    TradeStatusWorkflow.run,
                    StatusUpdateInput(trade_id=1, cancel=True),
                    id="status-1-cancel",
                    task_queue=CONFIG.task_queue,
                )
                assert not refused.success
                assert refused.message == "Only PENDING trades can be cancelled"


@pytest.mark.asyncio
async def test_rejected_booking_reports_phase() -> None:
    async with await WorkflowEnvironment.start_time_skipping() as env:
        with ThreadPoolExecutor(max_workers=CONFIG.activity_threads) as executor:
            async with build_worker(env.client, CONFIG, _service(), executor):
                handle = await env.client.start_workflow(
                    TradeBookingWorkflow.run,
                    BookTradeInput(request=request_to_dict(vanilla_request(counterparty_id=2))),
                    id="book-dormant",
                    task_queue=CONFIG.task_queue,
                )
                outcome = await handle.result()
                assert not outcome.success
                assert outcome.message == "Cannot trade with inactive counterparty: Dormant Capital"
                assert await handle.query(TradeBookingWorkflow.get_phase) == "REJECTED"
