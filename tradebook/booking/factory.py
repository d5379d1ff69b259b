"""Build a Trade from a validated booking request.

build_trade() copies the common fields, forces status to PENDING and
copies only the product fields relevant_fields() allows for the product.
It runs after validation, so a missing required field here is a bug in
the caller and raises TypeError instead of returning an error value.
"""

from __future__ import annotations

from typing import Any

from tradebook.core.money import normalize_currency
from tradebook.core.types import UtcDatetime
from tradebook.instrument.lifecycle import INITIAL_STATUS
from tradebook.instrument.trade import (
    Counterparty,
    Trade,
    TradeBookingRequest,
    relevant_fields,
)

_REQUIRED = (
    "trade_reference", "counterparty_id", "product_type", "base_currency",
    "quote_currency", "notional_amount", "trade_date", "value_date",
)

# Free-text vocabularies stored in canonical upper-case form.
_UPPER_CASE_FIELDS = frozenset({
    "knock_in_out", "observation_frequency", "floating_rate_index",
    "payment_frequency", "premium_currency",
})


def _canonical(name: str, value: Any) -> Any:
    if name in _UPPER_CASE_FIELDS and isinstance(value, str):
        return value.strip().upper()
    return value


def build_trade(
    request: TradeBookingRequest,
    counterparty: Counterparty,
    now: UtcDatetime,
) -> Trade:
    """Construct a PENDING Trade. The request must already be validated."""
    missing = [name for name in _REQUIRED if getattr(request, name) is None]
    if missing:
        raise TypeError(f"build_trade called with unvalidated request, missing: {missing}")
    if counterparty.counterparty_id is None:
        raise TypeError("build_trade requires a persisted counterparty")
    if counterparty.counterparty_id != request.counterparty_id:
        raise TypeError(
            f"Counterparty {counterparty.counterparty_id} does not match "
            f"request counterparty {request.counterparty_id}"
        )

    assert request.product_type is not None
    product_fields = {
        name: _canonical(name, getattr(request, name))
        for name in relevant_fields(request.product_type, request.exotic_option_type)
    }

    assert request.trade_reference is not None
    assert request.base_currency is not None and request.quote_currency is not None
    assert request.notional_amount is not None
    assert request.trade_date is not None and request.value_date is not None
    return Trade(
        trade_id=None,
        trade_reference=request.trade_reference.strip(),
        counterparty_id=counterparty.counterparty_id,
        counterparty_code=counterparty.counterparty_code,
        product_type=request.product_type,
        base_currency=normalize_currency(request.base_currency),
        quote_currency=normalize_currency(request.quote_currency),
        notional_amount=request.notional_amount,
        trade_date=request.trade_date,
        value_date=request.value_date,
        maturity_date=request.maturity_date,
        status=INITIAL_STATUS,
        created_at=now,
        updated_at=now,
        created_by=request.created_by,
        **product_fields,
    )
