"""Tests for tradebook.booking.factory."""

from __future__ import annotations

from decimal import Decimal

import pytest
from conftest import (
    ACTIVE_CP_ID,
    CLOCK,
    asian_request,
    barrier_request,
    fx_forward_request,
    fx_swap_request,
    irs_request,
    valid_vanilla_requests,
    vanilla_request,
)
from hypothesis import given

from tradebook.booking.factory import build_trade
from tradebook.instrument.trade import Counterparty, TradeBookingRequest, relevant_fields
from tradebook.instrument.types import ProductType, TradeStatus

ACME = Counterparty(
    counterparty_id=ACTIVE_CP_ID,
    counterparty_code="ACME",
    name="Acme Bank",
    created_at=CLOCK(),
)


class TestBuildTrade:
    def test_common_fields_copied(self) -> None:
        trade = build_trade(vanilla_request(), ACME, CLOCK())
        assert trade.trade_id is None
        assert trade.trade_reference == "TRD-001"
        assert trade.counterparty_id == ACTIVE_CP_ID
        assert trade.counterparty_code == "ACME"
        assert trade.product_type is ProductType.VANILLA_OPTION
        assert trade.notional_amount == Decimal("100000.00")
        assert trade.created_at == trade.updated_at == CLOCK()

    def test_status_forced_to_pending(self) -> None:
        assert build_trade(vanilla_request(), ACME, CLOCK()).status is TradeStatus.PENDING

    def test_currencies_upper_cased(self) -> None:
        trade = build_trade(vanilla_request(base_currency="eur", quote_currency="usd"), ACME, CLOCK())
        assert (trade.base_currency, trade.quote_currency) == ("EUR", "USD")

    def test_reference_stripped(self) -> None:
        trade = build_trade(vanilla_request(trade_reference="  TRD-001 "), ACME, CLOCK())
        assert trade.trade_reference == "TRD-001"

    def test_irrelevant_fields_dropped(self) -> None:
        req = vanilla_request(forward_rate=Decimal("1.3"), fixed_rate=Decimal("0.01"))
        trade = build_trade(req, ACME, CLOCK())
        assert trade.forward_rate is None
        assert trade.fixed_rate is None

    def test_barrier_fields_kept_and_canonical(self) -> None:
        trade = build_trade(barrier_request(knock_in_out="out"), ACME, CLOCK())
        assert trade.barrier_level == Decimal("1.3000")
        assert trade.knock_in_out == "OUT"
        assert trade.observation_frequency is None

    def test_asian_drops_barrier_fields(self) -> None:
        trade = build_trade(asian_request(barrier_level=Decimal("1.3")), ACME, CLOCK())
        assert trade.barrier_level is None
        assert trade.observation_frequency == "WEEKLY"

    def test_forward_keeps_rate(self) -> None:
        trade = build_trade(fx_forward_request(strike_price=Decimal("1.3")), ACME, CLOCK())
        assert trade.forward_rate == Decimal("1.2710")
        assert trade.strike_price is None

    def test_fx_swap_legs(self) -> None:
        trade = build_trade(fx_swap_request(), ACME, CLOCK())
        assert trade.near_leg_rate == Decimal("1.0850")
        assert trade.far_leg_date is not None

    def test_irs_index_upper_cased(self) -> None:
        trade = build_trade(irs_request(floating_rate_index="sofr"), ACME, CLOCK())
        assert trade.floating_rate_index == "SOFR"

    def test_premium_currency_upper_cased(self) -> None:
        req = vanilla_request(premium_amount=Decimal("10.00"), premium_currency="eur")
        assert build_trade(req, ACME, CLOCK()).premium_currency == "EUR"

    @pytest.mark.parametrize("builder", [
        vanilla_request, barrier_request, asian_request, fx_forward_request,
        fx_swap_request, irs_request,
    ])
    def test_no_orphaned_fields(self, builder) -> None:
        assert build_trade(builder(), ACME, CLOCK()).orphaned_fields() == frozenset()

    @given(valid_vanilla_requests())
    def test_populated_fields_within_relevant_set(self, request: TradeBookingRequest) -> None:
        trade = build_trade(request, ACME, CLOCK())
        assert trade.populated_product_fields() <= relevant_fields(ProductType.VANILLA_OPTION)


class TestProgrammingErrors:
    def test_missing_required_field(self) -> None:
        with pytest.raises(TypeError, match="notional_amount"):
            build_trade(vanilla_request(notional_amount=None), ACME, CLOCK())

    def test_unsaved_counterparty(self) -> None:
        unsaved = Counterparty(
            counterparty_id=None, counterparty_code="ACME", name="Acme Bank", created_at=CLOCK(),
        )
        with pytest.raises(TypeError, match="persisted counterparty"):
            build_trade(vanilla_request(), unsaved, CLOCK())

    def test_counterparty_mismatch(self) -> None:
        with pytest.raises(TypeError, match="does not match"):
            build_trade(vanilla_request(counterparty_id=7), ACME, CLOCK())
