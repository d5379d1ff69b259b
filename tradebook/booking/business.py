"""Booking-time business logic: default premium, post-trade flags, status hooks.

Default premium is a placeholder formula, not a valuation:

    premium = notional * rate * days(trade_date -> maturity_date) / basis

computed in BOOKING_DECIMAL_CONTEXT and rounded to 2 decimal places.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from decimal import Decimal, localcontext
from typing import final

from tradebook.core.calendar import days_between
from tradebook.core.money import BOOKING_DECIMAL_CONTEXT
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.instrument.trade import Trade
from tradebook.instrument.types import TradeStatus

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def default_premium(trade: Trade, limits: BookingLimits = DEFAULT_LIMITS) -> Decimal:
    """Placeholder premium for an option booked without one."""
    if trade.maturity_date is None:
        raise TypeError(f"Option trade {trade.trade_reference} has no maturity date")
    days = days_between(trade.trade_date, trade.maturity_date)
    with localcontext(BOOKING_DECIMAL_CONTEXT):
        raw = (
            trade.notional_amount * limits.default_premium_rate * Decimal(days)
            / Decimal(limits.day_count_basis)
        )
        return raw.quantize(_CENT)


def apply_business_logic(trade: Trade, limits: BookingLimits = DEFAULT_LIMITS) -> Trade:
    """Fill in defaults the request left open. Options get a premium."""
    if not trade.is_option or trade.premium_amount is not None:
        return trade
    premium = default_premium(trade, limits)
    logger.debug(
        "Default premium %s %s for %s", premium, trade.base_currency, trade.trade_reference,
    )
    return replace(trade, premium_amount=premium, premium_currency=trade.base_currency)


def post_trade_checks(trade: Trade, limits: BookingLimits = DEFAULT_LIMITS) -> bool:
    """Flag large trades for monitoring. Returns True when flagged."""
    if trade.notional_amount > limits.large_trade_threshold:
        logger.info(
            "Large trade booked: %s notional %s %s",
            trade.trade_reference, trade.notional_amount, trade.base_currency,
        )
        return True
    return False


# ---------------------------------------------------------------------------
# Status-change hooks
# ---------------------------------------------------------------------------

type StatusHook = Callable[[Trade], None]


@final
@dataclass
class StatusHooks:
    """Side effects keyed by the status a trade has just entered.

    fire() runs every hook registered for trade.status once, in
    registration order, and returns the names it ran.
    """

    _hooks: dict[TradeStatus, list[tuple[str, StatusHook]]] = field(default_factory=dict)

    def register(self, status: TradeStatus, name: str, hook: StatusHook) -> None:
        self._hooks.setdefault(status, []).append((name, hook))

    def names_for(self, status: TradeStatus) -> tuple[str, ...]:
        return tuple(name for name, _ in self._hooks.get(status, ()))

    def fire(self, trade: Trade) -> tuple[str, ...]:
        fired: list[str] = []
        for name, hook in self._hooks.get(trade.status, ()):
            logger.debug("Running %s hook for trade %s", name, trade.trade_reference)
            hook(trade)
            fired.append(name)
        return tuple(fired)


def initiate_settlement(trade: Trade) -> None:
    logger.info("Initiating settlement for trade %s", trade.trade_reference)


def update_positions(trade: Trade) -> None:
    logger.info("Updating positions for trade %s", trade.trade_reference)


def release_credit_limits(trade: Trade) -> None:
    logger.info("Releasing credit limits for trade %s", trade.trade_reference)


def process_expiry(trade: Trade) -> None:
    logger.info("Processing expiry for trade %s", trade.trade_reference)


def default_hooks() -> StatusHooks:
    hooks = StatusHooks()
    hooks.register(TradeStatus.CONFIRMED, "initiate_settlement", initiate_settlement)
    hooks.register(TradeStatus.SETTLED, "update_positions", update_positions)
    hooks.register(TradeStatus.CANCELLED, "release_credit_limits", release_credit_limits)
    hooks.register(TradeStatus.EXPIRED, "process_expiry", process_expiry)
    return hooks
