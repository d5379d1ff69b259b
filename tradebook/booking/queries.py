"""Read side of the trade book: pass-through filters over stored trades.

No business rules beyond argument sanity: positive ids, 3-letter
currency codes and date windows that are bounded, ordered and at most
a year wide. Results are returned in trade-id order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import final

from tradebook.booking.service import load_trade, storage_failure
from tradebook.core.errors import UserFacingError, not_found, validation_error
from tradebook.core.result import Err, Ok
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.infra.protocols import CounterpartyRepository, TradeRepository
from tradebook.instrument.trade import Trade
from tradebook.instrument.types import (
    ExoticOptionType,
    FloatingRateIndex,
    ProductType,
    SwapType,
    TradeStatus,
    is_fx_contract,
    is_swap_product,
    member_values,
)
from tradebook.validation.common import validate_currency_code, validate_date_range

logger = logging.getLogger(__name__)

_SRC = "booking.queries"

type Trades = Ok[tuple[Trade, ...]] | Err[UserFacingError]


def _within(d: date | None, start: date, end: date) -> bool:
    return d is not None and start <= d <= end


@final
class TradeQueryService:
    def __init__(
        self,
        trades: TradeRepository,
        counterparties: CounterpartyRepository,
        *,
        limits: BookingLimits = DEFAULT_LIMITS,
    ) -> None:
        self._trades = trades
        self._counterparties = counterparties
        self._limits = limits

    def _filter(self, predicate: Callable[[Trade], bool], operation: str) -> Trades:
        match self._trades.find_all():
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.{operation}"))
            case Ok(rows):
                matched = tuple(sorted(
                    (t for t in rows if predicate(t)), key=lambda t: t.trade_id or 0,
                ))
                logger.debug("%s matched %d trades", operation, len(matched))
                return Ok(matched)

    def _in_window(
        self,
        start: date | None,
        end: date | None,
        predicate: Callable[[Trade, date, date], bool],
        operation: str,
    ) -> Trades:
        match validate_date_range(start, end, self._limits):
            case Err() as err:
                return err
            case Ok((lo, hi)):
                return self._filter(lambda t: predicate(t, lo, hi), operation)

    # -- single trade --

    def get_trade(self, trade_id: int) -> Ok[Trade] | Err[UserFacingError]:
        return load_trade(self._trades, trade_id)

    def get_trade_by_reference(self, reference: str) -> Ok[Trade] | Err[UserFacingError]:
        if not reference or not reference.strip():
            return Err(validation_error(
                "Trade reference is required", f"{_SRC}.get_trade_by_reference",
                field="trade_reference",
            ))
        match self._trades.find_by_reference(reference.strip()):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.get_trade_by_reference"))
            case Ok(None):
                return Err(not_found(
                    "Trade", reference.strip(), f"{_SRC}.get_trade_by_reference", by="reference",
                ))
            case Ok(trade):
                return Ok(trade)

    # -- filters --

    def by_counterparty(self, counterparty_id: int) -> Trades:
        if counterparty_id <= 0:
            return Err(validation_error(
                "Valid counterparty ID is required", f"{_SRC}.by_counterparty",
                field="counterparty_id",
            ))
        match self._counterparties.find_by_id(counterparty_id):
            case Err(error):
                return Err(storage_failure(error, f"{_SRC}.by_counterparty"))
            case Ok(None):
                return Err(not_found("Counterparty", counterparty_id, f"{_SRC}.by_counterparty"))
            case Ok(_):
                pass
        return self._filter(lambda t: t.counterparty_id == counterparty_id, "by_counterparty")

    def by_status(self, status: TradeStatus) -> Trades:
        return self._filter(lambda t: t.status is status, "by_status")

    def by_product_type(self, product_type: ProductType) -> Trades:
        return self._filter(lambda t: t.product_type is product_type, "by_product_type")

    def by_currency(self, currency: str) -> Trades:
        """Trades whose base or quote currency matches."""
        match validate_currency_code(currency, "Currency", "currency"):
            case Err() as err:
                return err
            case Ok(code):
                return self._filter(
                    lambda t: code in (t.base_currency, t.quote_currency), "by_currency",
                )

    def by_trade_date_range(self, start: date | None, end: date | None) -> Trades:
        return self._in_window(
            start, end, lambda t, lo, hi: _within(t.trade_date, lo, hi), "by_trade_date_range",
        )

    def vanilla_options_expiring(self, start: date | None, end: date | None) -> Trades:
        return self._in_window(
            start, end,
            lambda t, lo, hi: (
                t.product_type is ProductType.VANILLA_OPTION
                and _within(t.maturity_date, lo, hi)
            ),
            "vanilla_options_expiring",
        )

    def exotic_options_by_type(self, exotic_type: ExoticOptionType) -> Trades:
        return self._filter(
            lambda t: (
                t.product_type is ProductType.EXOTIC_OPTION
                and t.exotic_option_type is exotic_type
            ),
            "exotic_options_by_type",
        )

    def swaps(self) -> Trades:
        return self._filter(lambda t: is_swap_product(t.product_type), "swaps")

    def swaps_by_type(self, swap_type: SwapType) -> Trades:
        return self._filter(
            lambda t: is_swap_product(t.product_type) and t.swap_type is swap_type,
            "swaps_by_type",
        )

    def interest_rate_swaps_by_index(self, index: str) -> Trades:
        norm = index.strip().upper()
        if norm not in member_values(FloatingRateIndex):
            return Err(validation_error(
                f"Unsupported floating rate index: {index}",
                f"{_SRC}.interest_rate_swaps_by_index",
                field="floating_rate_index",
            ))
        return self._filter(
            lambda t: (
                t.product_type is ProductType.INTEREST_RATE_SWAP
                and t.floating_rate_index == norm
            ),
            "interest_rate_swaps_by_index",
        )

    def fx_contracts(self) -> Trades:
        return self._filter(lambda t: is_fx_contract(t.product_type), "fx_contracts")

    def fx_forwards_maturing(self, start: date | None, end: date | None) -> Trades:
        return self._in_window(
            start, end,
            lambda t, lo, hi: (
                t.product_type is ProductType.FX_FORWARD and _within(t.maturity_date, lo, hi)
            ),
            "fx_forwards_maturing",
        )
