"""Closed enumerations that drive every dispatch decision.

ProductType selects the validator and the factory branch. The sub-type
enums (OptionType, ExoticOptionType, SwapType) refine it. TradeStatus is
the lifecycle state; transitions live in instrument.lifecycle.

The smaller vocabularies (barrier direction, observation frequency,
floating index, payment frequency) arrive as free text on the request
and are checked against these sets by the product validators.
"""

from __future__ import annotations

from enum import Enum


class ProductType(Enum):
    VANILLA_OPTION = "VANILLA_OPTION"
    EXOTIC_OPTION = "EXOTIC_OPTION"
    FX_FORWARD = "FX_FORWARD"
    FX_SPOT = "FX_SPOT"
    FX_SWAP = "FX_SWAP"
    CURRENCY_SWAP = "CURRENCY_SWAP"
    INTEREST_RATE_SWAP = "INTEREST_RATE_SWAP"

    @property
    def display_name(self) -> str:
        return _PRODUCT_DISPLAY[self]


_PRODUCT_DISPLAY: dict[ProductType, str] = {
    ProductType.VANILLA_OPTION: "Vanilla Option",
    ProductType.EXOTIC_OPTION: "Exotic Option",
    ProductType.FX_FORWARD: "FX Forward",
    ProductType.FX_SPOT: "FX Spot",
    ProductType.FX_SWAP: "FX Swap",
    ProductType.CURRENCY_SWAP: "Currency Swap",
    ProductType.INTEREST_RATE_SWAP: "Interest Rate Swap",
}

OPTION_PRODUCTS: frozenset[ProductType] = frozenset({
    ProductType.VANILLA_OPTION, ProductType.EXOTIC_OPTION,
})
FX_CONTRACT_PRODUCTS: frozenset[ProductType] = frozenset({
    ProductType.FX_FORWARD, ProductType.FX_SPOT,
})
SWAP_PRODUCTS: frozenset[ProductType] = frozenset({
    ProductType.FX_SWAP, ProductType.CURRENCY_SWAP, ProductType.INTEREST_RATE_SWAP,
})


def is_option_product(product_type: ProductType) -> bool:
    return product_type in OPTION_PRODUCTS


def is_fx_contract(product_type: ProductType) -> bool:
    return product_type in FX_CONTRACT_PRODUCTS


def is_swap_product(product_type: ProductType) -> bool:
    return product_type in SWAP_PRODUCTS


class OptionType(Enum):
    CALL = "CALL"
    PUT = "PUT"

    @property
    def display_name(self) -> str:
        return "Call Option" if self is OptionType.CALL else "Put Option"


class ExoticOptionType(Enum):
    """Exotic families. Only barrier, Asian and digital are bookable."""

    BARRIER_OPTION = "BARRIER_OPTION"
    ASIAN_OPTION = "ASIAN_OPTION"
    LOOKBACK_OPTION = "LOOKBACK_OPTION"
    DIGITAL_OPTION = "DIGITAL_OPTION"
    COMPOUND_OPTION = "COMPOUND_OPTION"
    RAINBOW_OPTION = "RAINBOW_OPTION"
    BERMUDA_OPTION = "BERMUDA_OPTION"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class SwapType(Enum):
    """Swap families. Cross-currency and basis swaps are not bookable."""

    FX_SWAP = "FX_SWAP"
    CURRENCY_SWAP = "CURRENCY_SWAP"
    INTEREST_RATE_SWAP = "INTEREST_RATE_SWAP"
    CROSS_CURRENCY_SWAP = "CROSS_CURRENCY_SWAP"
    BASIS_SWAP = "BASIS_SWAP"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title().replace("Fx", "FX")


# Swap product types and the sub-type each one must carry.
SWAP_TYPE_FOR_PRODUCT: dict[ProductType, SwapType] = {
    ProductType.FX_SWAP: SwapType.FX_SWAP,
    ProductType.CURRENCY_SWAP: SwapType.CURRENCY_SWAP,
    ProductType.INTEREST_RATE_SWAP: SwapType.INTEREST_RATE_SWAP,
}


class TradeStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SETTLED = "SETTLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[TradeStatus] = frozenset({
    TradeStatus.SETTLED, TradeStatus.CANCELLED, TradeStatus.EXPIRED,
})


class BarrierDirection(Enum):
    """Knock-in activates the option at the barrier, knock-out extinguishes it."""

    IN = "IN"
    OUT = "OUT"


class ObservationFrequency(Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class FloatingRateIndex(Enum):
    SOFR = "SOFR"
    LIBOR = "LIBOR"
    EURIBOR = "EURIBOR"
    SONIA = "SONIA"
    TONAR = "TONAR"


class PaymentFrequency(Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUAL = "SEMI_ANNUAL"
    ANNUAL = "ANNUAL"


def member_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Declared values of a str-valued enum, in declaration order."""
    return tuple(str(m.value) for m in enum_cls)
