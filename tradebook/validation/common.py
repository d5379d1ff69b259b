"""Field rules shared by every product type.

validate_common() runs the checks in _COMMON_CHECKS in order and stops at
the first violation. Only a request that passes every rule is inspected
for advisories, which come back beside the Ok verdict.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta
from decimal import Decimal

from tradebook.core.calendar import days_between, exceeds_tenor, is_business_day
from tradebook.core.errors import ValidationError, validation_error
from tradebook.core.money import (
    USD_QUOTED_BASES,
    fractional_digits,
    is_major_currency,
    normalize_currency,
)
from tradebook.core.result import Err, Ok, sequence
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.instrument.trade import TradeBookingRequest
from tradebook.instrument.types import ProductType, is_option_product
from tradebook.validation.advisories import (
    LARGE_NOTIONAL,
    NON_MAJOR_CURRENCY,
    PAIR_CONVENTION,
    SHORT_TENOR,
    STRIKE_FAR_FROM_SPOT,
    UNUSUAL_PREMIUM_CURRENCY,
    Advisory,
)

type Check = Callable[[TradeBookingRequest, date, BookingLimits], Ok[None] | Err[ValidationError]]

_SRC = "validation.common"


def _fail(message: str, field: str, check: str) -> Err[ValidationError]:
    return Err(validation_error(message, f"{_SRC}.{check}", field=field))


# ---------------------------------------------------------------------------
# Reusable rules
# ---------------------------------------------------------------------------


def validate_currency_code(
    code: str | None, label: str, field: str,
) -> Ok[str] | Err[ValidationError]:
    """Required 3-letter code. Returns the upper-cased form."""
    if code is None or not code.strip():
        return _fail(f"{label} is required", field, "validate_currency_code")
    norm = normalize_currency(code)
    if len(norm) != 3:
        return _fail(
            f"{label} must be exactly 3 characters: {code}", field, "validate_currency_code",
        )
    if not norm.isascii() or not norm.isalpha():
        return _fail(
            f"{label} must contain only letters: {code}", field, "validate_currency_code",
        )
    return Ok(norm)


def validate_date_range(
    start: date | None, end: date | None, limits: BookingLimits = DEFAULT_LIMITS,
) -> Ok[tuple[date, date]] | Err[ValidationError]:
    """Sanity rules for query windows: both bounds, ordered, at most a year wide."""
    if start is None or end is None:
        return _fail("Start date and end date cannot be null", "date_range", "validate_date_range")
    if start > end:
        return _fail("Start date cannot be after end date", "date_range", "validate_date_range")
    if exceeds_tenor(start, end, limits.max_query_range_years):
        return _fail("Date range cannot exceed 1 year", "date_range", "validate_date_range")
    return Ok((start, end))


def _check_rate(
    value: Decimal, label: str, field: str, limits: BookingLimits, *, ceiling: Decimal | None,
) -> Ok[None] | Err[ValidationError]:
    if not value.is_finite() or value <= limits.min_rate:
        return _fail(f"{label} must be greater than {limits.min_rate}", field, "check_rate")
    if ceiling is not None and value > ceiling:
        return _fail(f"{label} exceeds maximum limit of {ceiling}", field, "check_rate")
    if fractional_digits(value) > limits.rate_scale:
        return _fail(
            f"{label} cannot have more than {limits.rate_scale} decimal places", field, "check_rate",
        )
    return Ok(None)


# ---------------------------------------------------------------------------
# Ordered checks
# ---------------------------------------------------------------------------


def _same_day_maturity(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.maturity_date is not None and req.maturity_date == req.trade_date:
        return _fail("Same-day options are not supported", "maturity_date", "same_day_maturity")
    return Ok(None)


def _reference(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.trade_reference is None or not req.trade_reference.strip():
        return _fail("Trade reference is required", "trade_reference", "reference")
    if len(req.trade_reference) > limits.max_reference_length:
        return _fail(
            f"Trade reference cannot exceed {limits.max_reference_length} characters",
            "trade_reference", "reference",
        )
    return Ok(None)


def _counterparty(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.counterparty_id is None or req.counterparty_id <= 0:
        return _fail("Valid counterparty ID is required", "counterparty_id", "counterparty")
    return Ok(None)


def _product_type(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.product_type is None:
        return _fail("Product type is required", "product_type", "product_type")
    return Ok(None)


def _currencies(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    match validate_currency_code(req.base_currency, "Base currency", "base_currency"):
        case Err() as err:
            return err
        case Ok(base):
            pass
    match validate_currency_code(req.quote_currency, "Quote currency", "quote_currency"):
        case Err() as err:
            return err
        case Ok(quote):
            pass
    if req.product_type is ProductType.INTEREST_RATE_SWAP:
        if base != quote:
            return _fail(
                "Base and quote currency must be identical for interest rate swaps",
                "quote_currency", "currencies",
            )
    elif base == quote:
        return _fail(
            "Base currency and quote currency must be different", "quote_currency", "currencies",
        )
    return Ok(None)


def _notional(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    amount = req.notional_amount
    if amount is None:
        return _fail("Notional amount is required", "notional_amount", "notional")
    if not amount.is_finite():
        return _fail("Notional amount must be a finite number", "notional_amount", "notional")
    if amount < limits.min_notional:
        return _fail(
            f"Notional amount must be at least {limits.min_notional}", "notional_amount", "notional",
        )
    if amount > limits.max_notional:
        return _fail(
            f"Notional amount exceeds maximum limit of {limits.max_notional}",
            "notional_amount", "notional",
        )
    if fractional_digits(amount) > limits.notional_scale:
        return _fail(
            f"Notional amount cannot have more than {limits.notional_scale} decimal places",
            "notional_amount", "notional",
        )
    return Ok(None)


def _strike_and_spot(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    assert req.product_type is not None
    if is_option_product(req.product_type):
        if req.strike_price is None:
            return _fail("Strike price is required", "strike_price", "strike_and_spot")
        match _check_rate(
            req.strike_price, "Strike price", "strike_price", limits, ceiling=limits.max_strike,
        ):
            case Err() as err:
                return err
            case Ok():
                pass
    if req.spot_rate is not None:
        return _check_rate(req.spot_rate, "Spot rate", "spot_rate", limits, ceiling=None)
    return Ok(None)


def _dates(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.trade_date is None:
        return _fail("Trade date is required", "trade_date", "dates")
    if req.trade_date > today + timedelta(days=limits.max_trade_date_skew_days):
        return _fail("Trade date cannot be more than 1 day in the future", "trade_date", "dates")
    if req.value_date is None:
        return _fail("Value date is required", "value_date", "dates")
    if req.value_date < req.trade_date + timedelta(days=limits.min_settlement_lag_days):
        return _fail("Value date must be at least 1 day after trade date", "value_date", "dates")
    if req.maturity_date is not None:
        if req.maturity_date <= req.value_date:
            return _fail("Maturity date must be after value date", "maturity_date", "dates")
        if exceeds_tenor(req.trade_date, req.maturity_date, limits.max_tenor_years):
            return _fail(
                f"Maturity date exceeds maximum allowed tenor of {limits.max_tenor_years} years",
                "maturity_date", "dates",
            )
    return Ok(None)


def _weekdays(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    if req.value_date is not None and not is_business_day(req.value_date):
        return _fail(
            f"Value date cannot be a weekend: {req.value_date.isoformat()}", "value_date", "weekdays",
        )
    if req.maturity_date is not None and not is_business_day(req.maturity_date):
        return _fail(
            f"Maturity date cannot be a weekend: {req.maturity_date.isoformat()}",
            "maturity_date", "weekdays",
        )
    return Ok(None)


def _premium(
    req: TradeBookingRequest, today: date, limits: BookingLimits,
) -> Ok[None] | Err[ValidationError]:
    amount, currency = req.premium_amount, req.premium_currency
    if amount is None and currency is None:
        return Ok(None)
    if currency is None:
        return _fail(
            "Premium currency is required when premium amount is specified",
            "premium_currency", "premium",
        )
    if amount is None:
        return _fail(
            "Premium amount is required when premium currency is specified",
            "premium_amount", "premium",
        )
    if not amount.is_finite() or amount <= 0:
        return _fail("Premium amount must be positive", "premium_amount", "premium")
    if fractional_digits(amount) > limits.premium_scale:
        return _fail(
            f"Premium amount cannot have more than {limits.premium_scale} decimal places",
            "premium_amount", "premium",
        )
    match validate_currency_code(currency, "Premium currency", "premium_currency"):
        case Err() as err:
            return err
        case Ok():
            return Ok(None)


_COMMON_CHECKS: tuple[Check, ...] = (
    _same_day_maturity,
    _reference,
    _counterparty,
    _product_type,
    _currencies,
    _notional,
    _strike_and_spot,
    _dates,
    _weekdays,
    _premium,
)


# ---------------------------------------------------------------------------
# Advisories
# ---------------------------------------------------------------------------


def collect_advisories(
    req: TradeBookingRequest, limits: BookingLimits = DEFAULT_LIMITS,
) -> tuple[Advisory, ...]:
    """Warnings for a request that already passed the common rules."""
    assert req.base_currency is not None and req.quote_currency is not None
    assert req.notional_amount is not None and req.trade_date is not None
    base = normalize_currency(req.base_currency)
    quote = normalize_currency(req.quote_currency)
    found: list[Advisory] = []

    for code in dict.fromkeys((base, quote)):
        if not is_major_currency(code):
            found.append(Advisory(NON_MAJOR_CURRENCY, f"Non-major currency: {code}"))

    if base == "USD" and quote in USD_QUOTED_BASES:
        found.append(Advisory(
            PAIR_CONVENTION,
            f"Currency pair {base}/{quote} is conventionally quoted as {quote}/{base}",
        ))

    if req.notional_amount > limits.large_notional_advisory:
        found.append(Advisory(LARGE_NOTIONAL, f"Large notional amount: {req.notional_amount}"))

    if req.maturity_date is not None:
        tenor_days = days_between(req.trade_date, req.maturity_date)
        if tenor_days < limits.short_tenor_days:
            found.append(Advisory(SHORT_TENOR, f"Short tenor: {tenor_days} days to maturity"))

    if req.strike_price is not None and req.spot_rate is not None:
        ratio = req.strike_price / req.spot_rate
        if ratio < limits.strike_spot_lower or ratio > limits.strike_spot_upper:
            found.append(Advisory(
                STRIKE_FAR_FROM_SPOT,
                f"Strike {req.strike_price} is more than 50% away from spot {req.spot_rate}",
            ))

    if req.premium_currency is not None:
        premium_ccy = normalize_currency(req.premium_currency)
        if premium_ccy not in (base, quote, "USD"):
            found.append(Advisory(
                UNUSUAL_PREMIUM_CURRENCY,
                f"Premium currency {premium_ccy} is neither a trade currency nor USD",
            ))

    return tuple(found)


def validate_common(
    request: TradeBookingRequest,
    today: date,
    limits: BookingLimits = DEFAULT_LIMITS,
) -> Ok[tuple[Advisory, ...]] | Err[ValidationError]:
    """Run the shared rules, fail-fast. Pure: same input, same verdict."""
    verdict = sequence(check(request, today, limits) for check in _COMMON_CHECKS)
    if isinstance(verdict, Err):
        return verdict
    return Ok(collect_advisories(request, limits))
