"""Trade booking request, Counterparty and the Trade record.

Trade is a single record with a ProductType discriminant and a set of
optional product fields. relevant_fields() says which optional fields
are meaningful for a product; a stored Trade never carries any others.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import assert_never, final

from tradebook.core.types import UtcDatetime
from tradebook.instrument.types import (
    ExoticOptionType,
    OptionType,
    ProductType,
    SwapType,
    TradeStatus,
)

# ---------------------------------------------------------------------------
# Inbound request
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TradeBookingRequest:
    """Flat superset of every product's fields.

    Nothing here is guaranteed present: the validators decide which
    subset the product type requires.
    """

    trade_reference: str | None = None
    counterparty_id: int | None = None
    product_type: ProductType | None = None
    base_currency: str | None = None
    quote_currency: str | None = None
    notional_amount: Decimal | None = None
    trade_date: date | None = None
    value_date: date | None = None
    maturity_date: date | None = None
    # options
    option_type: OptionType | None = None
    exotic_option_type: ExoticOptionType | None = None
    strike_price: Decimal | None = None
    spot_rate: Decimal | None = None
    barrier_level: Decimal | None = None
    knock_in_out: str | None = None
    observation_frequency: str | None = None
    premium_amount: Decimal | None = None
    premium_currency: str | None = None
    # FX contracts
    forward_rate: Decimal | None = None
    # swaps
    swap_type: SwapType | None = None
    near_leg_amount: Decimal | None = None
    far_leg_amount: Decimal | None = None
    near_leg_rate: Decimal | None = None
    far_leg_rate: Decimal | None = None
    near_leg_date: date | None = None
    far_leg_date: date | None = None
    fixed_rate: Decimal | None = None
    floating_rate_index: str | None = None
    payment_frequency: str | None = None
    created_by: str | None = None


# ---------------------------------------------------------------------------
# Counterparty
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class CounterpartyRequest:
    counterparty_code: str | None = None
    name: str | None = None
    lei_code: str | None = None
    swift_code: str | None = None
    credit_rating: str | None = None
    is_active: bool | None = None


@final
@dataclass(frozen=True, slots=True)
class Counterparty:
    """A legal entity we trade with. Must be active to book against."""

    counterparty_id: int | None
    counterparty_code: str
    name: str
    created_at: UtcDatetime
    lei_code: str | None = None
    swift_code: str | None = None
    credit_rating: str | None = None
    is_active: bool = True


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

_OPTION_FIELDS = frozenset({
    "option_type", "strike_price", "spot_rate", "premium_amount", "premium_currency",
})
_SWAP_LEG_FIELDS = frozenset({
    "near_leg_amount", "far_leg_amount", "near_leg_rate", "far_leg_rate",
    "near_leg_date", "far_leg_date",
})


def relevant_fields(
    product_type: ProductType,
    exotic_option_type: ExoticOptionType | None = None,
) -> frozenset[str]:
    """Optional Trade fields that carry meaning for this product."""
    match product_type:
        case ProductType.VANILLA_OPTION:
            return _OPTION_FIELDS
        case ProductType.EXOTIC_OPTION:
            extra: frozenset[str]
            match exotic_option_type:
                case ExoticOptionType.BARRIER_OPTION:
                    extra = frozenset({"barrier_level", "knock_in_out"})
                case ExoticOptionType.ASIAN_OPTION:
                    extra = frozenset({"observation_frequency"})
                case _:
                    extra = frozenset()
            return _OPTION_FIELDS | {"exotic_option_type"} | extra
        case ProductType.FX_FORWARD:
            return frozenset({"forward_rate", "spot_rate"})
        case ProductType.FX_SPOT:
            return frozenset({"spot_rate"})
        case ProductType.FX_SWAP:
            return _SWAP_LEG_FIELDS | {"swap_type"}
        case ProductType.CURRENCY_SWAP:
            return _SWAP_LEG_FIELDS | {"swap_type", "fixed_rate", "payment_frequency"}
        case ProductType.INTEREST_RATE_SWAP:
            return frozenset({
                "swap_type", "fixed_rate", "floating_rate_index", "payment_frequency",
            })
        case _never:
            assert_never(_never)


@final
@dataclass(frozen=True, slots=True)
class Trade:
    """The persisted trade aggregate.

    Immutable: status changes and amendments produce a new Trade via
    dataclasses.replace and go back through the repository.
    """

    trade_id: int | None
    trade_reference: str
    counterparty_id: int
    counterparty_code: str
    product_type: ProductType
    base_currency: str
    quote_currency: str
    notional_amount: Decimal
    trade_date: date
    value_date: date
    maturity_date: date | None
    status: TradeStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime
    created_by: str | None = None
    option_type: OptionType | None = None
    exotic_option_type: ExoticOptionType | None = None
    strike_price: Decimal | None = None
    spot_rate: Decimal | None = None
    barrier_level: Decimal | None = None
    knock_in_out: str | None = None
    observation_frequency: str | None = None
    premium_amount: Decimal | None = None
    premium_currency: str | None = None
    forward_rate: Decimal | None = None
    swap_type: SwapType | None = None
    near_leg_amount: Decimal | None = None
    far_leg_amount: Decimal | None = None
    near_leg_rate: Decimal | None = None
    far_leg_rate: Decimal | None = None
    near_leg_date: date | None = None
    far_leg_date: date | None = None
    fixed_rate: Decimal | None = None
    floating_rate_index: str | None = None
    payment_frequency: str | None = None

    def populated_product_fields(self) -> frozenset[str]:
        return frozenset(
            name for name in PRODUCT_FIELD_NAMES if getattr(self, name) is not None
        )

    def orphaned_fields(self) -> frozenset[str]:
        """Populated product fields that mean nothing for product_type."""
        allowed = relevant_fields(self.product_type, self.exotic_option_type)
        return self.populated_product_fields() - allowed

    @property
    def is_option(self) -> bool:
        return self.product_type in (ProductType.VANILLA_OPTION, ProductType.EXOTIC_OPTION)


_COMMON_TRADE_FIELDS = frozenset({
    "trade_id", "trade_reference", "counterparty_id", "counterparty_code",
    "product_type", "base_currency", "quote_currency", "notional_amount",
    "trade_date", "value_date", "maturity_date", "status", "created_at",
    "updated_at", "created_by",
})

PRODUCT_FIELD_NAMES: tuple[str, ...] = tuple(
    f.name for f in fields(Trade) if f.name not in _COMMON_TRADE_FIELDS
)
