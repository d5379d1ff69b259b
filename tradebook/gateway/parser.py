"""Gateway parser: raw dict to TradeBookingRequest / CounterpartyRequest.

parse_booking_request is the single entry point for external booking
data. Keys may be snake_case or camelCase. Total: it always returns Ok
or Err and never raises. Missing fields stay None, because deciding
what is required belongs to the validators. Only values that cannot be
converted to the field's type are rejected here.

Decimals are built from the text form, so "100000.00" keeps its two
fractional digits and the scale rules downstream stay exact.
"""

from __future__ import annotations

import re
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from tradebook.core.errors import ValidationError, validation_error
from tradebook.core.result import Err, Ok
from tradebook.core.types import UtcDatetime
from tradebook.instrument.trade import CounterpartyRequest, Trade, TradeBookingRequest
from tradebook.instrument.types import ExoticOptionType, OptionType, ProductType, SwapType

_SRC = "gateway.parser"

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "product_type": ProductType,
    "option_type": OptionType,
    "exotic_option_type": ExoticOptionType,
    "swap_type": SwapType,
}
_DECIMAL_FIELDS = frozenset({
    "notional_amount", "strike_price", "spot_rate", "barrier_level",
    "premium_amount", "forward_rate", "near_leg_amount", "far_leg_amount",
    "near_leg_rate", "far_leg_rate", "fixed_rate",
})
_DATE_FIELDS = frozenset({
    "trade_date", "value_date", "maturity_date", "near_leg_date", "far_leg_date",
})
_INT_FIELDS = frozenset({"counterparty_id"})

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _label(name: str) -> str:
    return name.replace("_", " ")


def _normalise_keys(raw: dict[str, Any]) -> dict[str, Any]:
    """snake_case view of raw. An explicit snake_case key wins over its camelCase twin."""
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(key, str):
            out.setdefault(_snake(key), value)
    for key, value in raw.items():
        if isinstance(key, str) and key == _snake(key):
            out[key] = value
    return out


def _extract_str(val: object) -> str | None:
    if isinstance(val, str):
        return val
    return None


def _extract_int(val: object) -> int | None:
    if isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, str) and val.isascii():
        try:
            return int(val.strip())
        except ValueError:
            return None
    return None


def _extract_decimal(val: object) -> Decimal | None:
    if isinstance(val, bool):
        return None
    if isinstance(val, Decimal):
        return val if val.is_finite() else None
    if isinstance(val, (int, float, str)):
        try:
            parsed = Decimal(str(val).strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def _extract_date(val: object) -> date | None:
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        try:
            return date.fromisoformat(val.strip())
        except ValueError:
            return None
    return None


def parse_enum[E: Enum](enum_cls: type[E], value: object) -> E | None:
    """Member by name, value or display name, case-insensitive."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    wanted = value.strip().upper()
    for member in enum_cls:
        candidates = {member.name, str(member.value).upper()}
        display = getattr(member, "display_name", None)
        if isinstance(display, str):
            candidates.add(display.upper())
        if wanted in candidates:
            return member
    return None


def _convert(name: str, val: object) -> Ok[object] | Err[ValidationError]:
    if val is None:
        return Ok(None)
    converted: object
    if name in _ENUM_FIELDS:
        converted = parse_enum(_ENUM_FIELDS[name], val)
        if converted is None:
            return Err(validation_error(
                f"Unsupported {_label(name)}: {val}", f"{_SRC}.convert",
                field=name, code="PARSE",
            ))
        return Ok(converted)
    if name in _DECIMAL_FIELDS:
        converted = _extract_decimal(val)
    elif name in _DATE_FIELDS:
        converted = _extract_date(val)
    elif name in _INT_FIELDS:
        converted = _extract_int(val)
    else:
        converted = _extract_str(val)
    if converted is None:
        return Err(validation_error(
            f"Invalid {_label(name)}: {val!r}", f"{_SRC}.convert", field=name, code="PARSE",
        ))
    return Ok(converted)


def parse_booking_request(
    raw: dict[str, Any],
) -> Ok[TradeBookingRequest] | Err[ValidationError]:
    """Parse a raw dict into a TradeBookingRequest. Stops at the first bad value."""
    if not isinstance(raw, dict):
        return Err(validation_error(
            "Booking request must be an object", f"{_SRC}.parse_booking_request", code="PARSE",
        ))
    data = _normalise_keys(raw)
    values: dict[str, object] = {}
    for f in fields(TradeBookingRequest):
        match _convert(f.name, data.get(f.name)):
            case Err() as err:
                return err
            case Ok(value):
                values[f.name] = value
    return Ok(TradeBookingRequest(**values))  # type: ignore[arg-type]


def parse_counterparty_request(
    raw: dict[str, Any],
) -> Ok[CounterpartyRequest] | Err[ValidationError]:
    if not isinstance(raw, dict):
        return Err(validation_error(
            "Counterparty request must be an object", f"{_SRC}.parse_counterparty_request",
            code="PARSE",
        ))
    data = _normalise_keys(raw)
    values: dict[str, object] = {}
    for f in fields(CounterpartyRequest):
        val = data.get(f.name)
        if val is None:
            values[f.name] = None
        elif f.name == "is_active":
            if not isinstance(val, bool):
                return Err(validation_error(
                    f"Invalid is active: {val!r}", f"{_SRC}.parse_counterparty_request",
                    field="is_active", code="PARSE",
                ))
            values[f.name] = val
        elif isinstance(val, str):
            values[f.name] = val
        else:
            return Err(validation_error(
                f"Invalid {_label(f.name)}: {val!r}", f"{_SRC}.parse_counterparty_request",
                field=f.name, code="PARSE",
            ))
    return Ok(CounterpartyRequest(**values))  # type: ignore[arg-type]


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def request_to_dict(request: TradeBookingRequest) -> dict[str, object]:
    """Inverse of parse_booking_request: snake_case keys, None fields omitted."""
    return {
        f.name: _plain(getattr(request, f.name))
        for f in fields(request)
        if getattr(request, f.name) is not None
    }


def trade_to_dict(trade: Trade) -> dict[str, object]:
    """JSON-friendly view of a stored trade, None fields omitted."""
    out: dict[str, object] = {}
    for f in fields(trade):
        value = getattr(trade, f.name)
        if value is None:
            continue
        out[f.name] = value.isoformat() if isinstance(value, UtcDatetime) else _plain(value)
    return out
