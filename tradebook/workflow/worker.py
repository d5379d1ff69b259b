"""Worker configuration for the trade booking workflows.

Starts a Temporal worker with both workflows and the BookingActivities
methods registered on the configured task queue.

Usage::

    import asyncio
    from tradebook.infra.config import load_config
    from tradebook.workflow.worker import run_worker

    asyncio.run(run_worker(load_config().unwrap().temporal))
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor

from temporalio.client import Client
from temporalio.worker import Worker

from tradebook.booking.service import TradeBookingService
from tradebook.infra.config import TemporalConfig
from tradebook.infra.memory_adapter import InMemoryCounterpartyRepository, InMemoryTradeRepository
from tradebook.workflow.activities import BookingActivities
from tradebook.workflow.booking_workflow import TradeBookingWorkflow, TradeStatusWorkflow

logger = logging.getLogger(__name__)


def build_worker(
    client: Client,
    config: TemporalConfig,
    service: TradeBookingService,
    executor: Executor,
) -> Worker:
    """Worker for both workflows. Activities are sync and run on executor."""
    activities = BookingActivities(service)
    return Worker(
        client,
        task_queue=config.task_queue,
        activity_executor=executor,
        max_concurrent_activities=config.activity_threads,
        workflows=[TradeBookingWorkflow, TradeStatusWorkflow],
        activities=[
            activities.book_trade,
            activities.update_trade_status,
            activities.cancel_trade,
        ],
    )


async def run_worker(
    config: TemporalConfig | None = None,
    service: TradeBookingService | None = None,
) -> None:
    """Connect to Temporal and run the worker until interrupted.

    Without a service the worker books into in-memory repositories.
    """
    config = config if config is not None else TemporalConfig()
    if service is None:
        logger.warning("No booking service supplied, using in-memory repositories")
        service = TradeBookingService(InMemoryTradeRepository(), InMemoryCounterpartyRepository())
    client = await Client.connect(config.target_host, namespace=config.namespace)
    logger.info(
        "Starting worker on %s (namespace %s, queue %s)",
        config.target_host, config.namespace, config.task_queue,
    )
    with ThreadPoolExecutor(max_workers=config.activity_threads) as executor:
        await build_worker(client, config, service, executor).run()
