"""Hypothesis strategies, request builders and pytest fixtures.

All dates are relative to a pinned clock: TODAY is Wednesday 2026-03-04,
so TODAY + 2 (value date) and TODAY + 30 (maturity) are both weekdays.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest
from hypothesis import HealthCheck, settings
from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from tradebook.booking.queries import TradeQueryService
from tradebook.booking.service import TradeBookingService
from tradebook.core.calendar import is_business_day
from tradebook.core.result import unwrap
from tradebook.core.types import fixed_clock
from tradebook.infra.memory_adapter import (
    InMemoryCounterpartyRepository,
    InMemoryTradeRepository,
)
from tradebook.instrument.trade import Counterparty, TradeBookingRequest
from tradebook.instrument.types import (
    ExoticOptionType,
    OptionType,
    ProductType,
    SwapType,
)

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ---------------------------------------------------------------------------
# Pinned time
# ---------------------------------------------------------------------------

NOW = datetime(2026, 3, 4, 10, 0, tzinfo=UTC)
TODAY = NOW.date()
CLOCK = fixed_clock(NOW)

ACTIVE_CP_ID = 1
INACTIVE_CP_ID = 2


def days(n: int) -> date:
    return TODAY + timedelta(days=n)


# ---------------------------------------------------------------------------
# Request builders
# ---------------------------------------------------------------------------


def vanilla_request(**overrides: Any) -> TradeBookingRequest:
    """The canonical TRD-001 EUR/USD call."""
    base = TradeBookingRequest(
        trade_reference="TRD-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.VANILLA_OPTION,
        base_currency="EUR",
        quote_currency="USD",
        notional_amount=Decimal("100000.00"),
        trade_date=TODAY,
        value_date=days(2),
        maturity_date=days(30),
        option_type=OptionType.CALL,
        strike_price=Decimal("1.2500"),
        spot_rate=Decimal("1.2000"),
    )
    return replace(base, **overrides)


def barrier_request(**overrides: Any) -> TradeBookingRequest:
    fields: dict[str, Any] = {
        "trade_reference": "TRD-BAR-001",
        "product_type": ProductType.EXOTIC_OPTION,
        "exotic_option_type": ExoticOptionType.BARRIER_OPTION,
        "barrier_level": Decimal("1.3000"),
        "knock_in_out": "OUT",
    }
    return vanilla_request(**{**fields, **overrides})


def asian_request(**overrides: Any) -> TradeBookingRequest:
    fields: dict[str, Any] = {
        "trade_reference": "TRD-ASN-001",
        "product_type": ProductType.EXOTIC_OPTION,
        "exotic_option_type": ExoticOptionType.ASIAN_OPTION,
        "observation_frequency": "WEEKLY",
    }
    return vanilla_request(**{**fields, **overrides})


def fx_forward_request(**overrides: Any) -> TradeBookingRequest:
    base = TradeBookingRequest(
        trade_reference="TRD-FWD-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.FX_FORWARD,
        base_currency="GBP",
        quote_currency="USD",
        notional_amount=Decimal("250000.00"),
        trade_date=TODAY,
        value_date=days(2),
        maturity_date=days(91),
        forward_rate=Decimal("1.2710"),
        spot_rate=Decimal("1.2650"),
    )
    return replace(base, **overrides)


def fx_spot_request(**overrides: Any) -> TradeBookingRequest:
    base = TradeBookingRequest(
        trade_reference="TRD-SPT-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.FX_SPOT,
        base_currency="EUR",
        quote_currency="JPY",
        notional_amount=Decimal("500000.00"),
        trade_date=TODAY,
        value_date=days(2),
        spot_rate=Decimal("161.250"),
    )
    return replace(base, **overrides)


def fx_swap_request(**overrides: Any) -> TradeBookingRequest:
    base = TradeBookingRequest(
        trade_reference="TRD-FXS-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.FX_SWAP,
        swap_type=SwapType.FX_SWAP,
        base_currency="EUR",
        quote_currency="USD",
        notional_amount=Decimal("1000000.00"),
        trade_date=TODAY,
        value_date=days(2),
        maturity_date=days(93),
        near_leg_date=days(2),
        far_leg_date=days(93),
        near_leg_rate=Decimal("1.0850"),
        far_leg_rate=Decimal("1.0892"),
        near_leg_amount=Decimal("1000000.00"),
        far_leg_amount=Decimal("1000000.00"),
    )
    return replace(base, **overrides)


def currency_swap_request(**overrides: Any) -> TradeBookingRequest:
    base = TradeBookingRequest(
        trade_reference="TRD-CCS-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.CURRENCY_SWAP,
        swap_type=SwapType.CURRENCY_SWAP,
        base_currency="USD",
        quote_currency="JPY",
        notional_amount=Decimal("5000000.00"),
        trade_date=TODAY,
        value_date=days(2),
        maturity_date=date(2031, 3, 4),
        fixed_rate=Decimal("0.0325"),
        payment_frequency="SEMI_ANNUAL",
    )
    return replace(base, **overrides)


def irs_request(**overrides: Any) -> TradeBookingRequest:
    base = TradeBookingRequest(
        trade_reference="TRD-IRS-001",
        counterparty_id=ACTIVE_CP_ID,
        product_type=ProductType.INTEREST_RATE_SWAP,
        swap_type=SwapType.INTEREST_RATE_SWAP,
        base_currency="USD",
        quote_currency="USD",
        notional_amount=Decimal("10000000.00"),
        trade_date=TODAY,
        value_date=days(2),
        maturity_date=date(2031, 3, 4),
        fixed_rate=Decimal("0.0410"),
        floating_rate_index="SOFR",
        payment_frequency="QUARTERLY",
    )
    return replace(base, **overrides)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def weekday_offsets(min_days: int, max_days: int) -> SearchStrategy[int]:
    """Day offsets from TODAY that land on a weekday."""
    return st.integers(min_value=min_days, max_value=max_days).filter(
        lambda n: is_business_day(days(n)),
    )


def weekend_offsets(min_days: int, max_days: int) -> SearchStrategy[int]:
    return st.integers(min_value=min_days, max_value=max_days).filter(
        lambda n: not is_business_day(days(n)),
    )


def valid_notionals() -> SearchStrategy[Decimal]:
    return st.decimals(
        min_value=Decimal("10000.00"),
        max_value=Decimal("1000000000.00"),
        places=2,
        allow_nan=False,
        allow_infinity=False,
    )


@st.composite
def valid_vanilla_requests(draw: st.DrawFn) -> TradeBookingRequest:
    """Vanilla options that pass every rule, with weekday value and maturity dates."""
    value_offset = draw(weekday_offsets(1, 5))
    maturity_offset = draw(weekday_offsets(value_offset + 1, 365 * 4))
    spot = draw(st.decimals(
        min_value=Decimal("0.5"), max_value=Decimal("150"), places=4,
        allow_nan=False, allow_infinity=False,
    ))
    return vanilla_request(
        trade_reference=draw(st.from_regex(r"TRD-[0-9]{1,8}", fullmatch=True)),
        notional_amount=draw(valid_notionals()),
        value_date=days(value_offset),
        maturity_date=days(maturity_offset),
        option_type=draw(st.sampled_from(OptionType)),
        strike_price=spot,
        spot_rate=spot,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _counterparty(cp_id: int | None, code: str, name: str, *, active: bool) -> Counterparty:
    return Counterparty(
        counterparty_id=cp_id,
        counterparty_code=code,
        name=name,
        created_at=CLOCK(),
        lei_code=None,
        swift_code=None,
        credit_rating="AA",
        is_active=active,
    )


@pytest.fixture
def trade_repo() -> InMemoryTradeRepository:
    return InMemoryTradeRepository()


def seeded_counterparties() -> InMemoryCounterpartyRepository:
    """ACME (id 1, active) and DORMANT (id 2, inactive)."""
    repo = InMemoryCounterpartyRepository()
    unwrap(repo.save(_counterparty(None, "ACME", "Acme Bank", active=True)))
    unwrap(repo.save(_counterparty(None, "DORMANT", "Dormant Capital", active=False)))
    return repo


@pytest.fixture
def counterparty_repo() -> InMemoryCounterpartyRepository:
    return seeded_counterparties()


@pytest.fixture
def service(
    trade_repo: InMemoryTradeRepository,
    counterparty_repo: InMemoryCounterpartyRepository,
) -> TradeBookingService:
    return TradeBookingService(trade_repo, counterparty_repo, clock=CLOCK)


@pytest.fixture
def queries(
    trade_repo: InMemoryTradeRepository,
    counterparty_repo: InMemoryCounterpartyRepository,
) -> TradeQueryService:
    return TradeQueryService(trade_repo, counterparty_repo)
