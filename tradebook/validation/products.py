"""Product-specific validators and the registry that selects them.

Each validator declares the ProductTypes it covers. default_registry()
registers all of them and refuses to start if any ProductType is left
without a validator, so a lookup at booking time can never miss.

Product validators run only after validate_common() has passed: trade,
value date and currencies are known to be present and well formed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol, assert_never, final, runtime_checkable

from tradebook.core.calendar import exceeds_tenor
from tradebook.core.errors import ValidationError, validation_error
from tradebook.core.money import fractional_digits
from tradebook.core.result import Err, Ok
from tradebook.infra.config import DEFAULT_LIMITS, BookingLimits
from tradebook.instrument.trade import TradeBookingRequest
from tradebook.instrument.types import (
    SWAP_TYPE_FOR_PRODUCT,
    BarrierDirection,
    ExoticOptionType,
    FloatingRateIndex,
    ObservationFrequency,
    PaymentFrequency,
    ProductType,
    member_values,
)


def _fail(message: str, field: str, source: str) -> Err[ValidationError]:
    return Err(validation_error(message, f"validation.products.{source}", field=field))


def _require_positive(
    value: Decimal | None, label: str, field: str, source: str,
) -> Ok[None] | Err[ValidationError]:
    if value is not None and (not value.is_finite() or value <= 0):
        return _fail(f"{label} must be positive", field, source)
    return Ok(None)


# ---------------------------------------------------------------------------
# Protocol + registry
# ---------------------------------------------------------------------------


@runtime_checkable
class ProductValidator(Protocol):
    """Validates the product-specific subset of a booking request."""

    @property
    def product_types(self) -> frozenset[ProductType]: ...

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        ...


@final
@dataclass
class ProductValidatorRegistry:
    """One validator per ProductType."""

    _validators: dict[ProductType, ProductValidator] = field(default_factory=dict)

    def register(self, validator: ProductValidator) -> None:
        for product_type in validator.product_types:
            if product_type in self._validators:
                raise RuntimeError(
                    f"Validator already registered for product type {product_type.value}"
                )
            self._validators[product_type] = validator

    def missing(self) -> frozenset[ProductType]:
        return frozenset(ProductType).difference(self._validators)

    def resolve(self, product_type: ProductType) -> ProductValidator:
        try:
            return self._validators[product_type]
        except KeyError:
            raise RuntimeError(
                f"No validator found for product type: {product_type.value}"
            ) from None

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits = DEFAULT_LIMITS,
    ) -> Ok[None] | Err[ValidationError]:
        if request.product_type is None:
            raise TypeError("validate_common must run before product validation")
        return self.resolve(request.product_type).validate(request, limits)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def _option_rules(
    req: TradeBookingRequest, limits: BookingLimits, *, plural: str, title: str,
) -> Ok[None] | Err[ValidationError]:
    src = "option_rules"
    if req.option_type is None:
        return _fail(f"Option type is required for {plural}", "option_type", src)
    if req.strike_price is None:
        return _fail(f"Strike price is required for {plural}", "strike_price", src)
    if req.maturity_date is None:
        return _fail(f"Maturity date is required for {plural}", "maturity_date", src)
    assert req.value_date is not None and req.trade_date is not None
    if req.maturity_date <= req.value_date:
        return _fail(f"Maturity date must be after value date for {plural}", "maturity_date", src)
    if exceeds_tenor(req.trade_date, req.maturity_date, limits.vanilla_max_tenor_years):
        return _fail(
            f"{title} tenor cannot exceed {limits.vanilla_max_tenor_years} years",
            "maturity_date", src,
        )
    return Ok(None)


@final
@dataclass(frozen=True, slots=True)
class VanillaOptionValidator:
    @property
    def product_types(self) -> frozenset[ProductType]:
        return frozenset({ProductType.VANILLA_OPTION})

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        return _option_rules(request, limits, plural="vanilla options", title="Vanilla option")


_BARRIER_DIRECTIONS = member_values(BarrierDirection)
_OBSERVATION_FREQUENCIES = member_values(ObservationFrequency)


@final
@dataclass(frozen=True, slots=True)
class ExoticOptionValidator:
    """Vanilla rules first, then barrier / Asian / digital sub-rules."""

    @property
    def product_types(self) -> frozenset[ProductType]:
        return frozenset({ProductType.EXOTIC_OPTION})

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        match _option_rules(request, limits, plural="exotic options", title="Exotic option"):
            case Err() as err:
                return err
            case Ok():
                pass
        exotic = request.exotic_option_type
        if exotic is None:
            return _fail(
                "Exotic option type is required for exotic options", "exotic_option_type", "exotic",
            )
        match exotic:
            case ExoticOptionType.BARRIER_OPTION:
                return self._barrier(request)
            case ExoticOptionType.ASIAN_OPTION:
                return self._asian(request)
            case ExoticOptionType.DIGITAL_OPTION:
                # fixed payout, nothing further to check
                return Ok(None)
            case (
                ExoticOptionType.LOOKBACK_OPTION
                | ExoticOptionType.COMPOUND_OPTION
                | ExoticOptionType.RAINBOW_OPTION
                | ExoticOptionType.BERMUDA_OPTION
            ):
                return _fail(
                    f"Unsupported exotic option type: {exotic.display_name}",
                    "exotic_option_type", "exotic",
                )
            case _never:
                assert_never(_never)

    @staticmethod
    def _barrier(req: TradeBookingRequest) -> Ok[None] | Err[ValidationError]:
        if req.barrier_level is None:
            return _fail("Barrier level is required for barrier options", "barrier_level", "barrier")
        if not req.barrier_level.is_finite() or req.barrier_level <= 0:
            return _fail("Barrier level must be positive", "barrier_level", "barrier")
        if req.knock_in_out is None or not req.knock_in_out.strip():
            return _fail(
                "Knock-in/out specification is required for barrier options",
                "knock_in_out", "barrier",
            )
        if req.knock_in_out.strip().upper() not in _BARRIER_DIRECTIONS:
            return _fail("Knock-in/out must be either 'IN' or 'OUT'", "knock_in_out", "barrier")
        return Ok(None)

    @staticmethod
    def _asian(req: TradeBookingRequest) -> Ok[None] | Err[ValidationError]:
        freq = req.observation_frequency
        if freq is None or not freq.strip():
            return _fail(
                "Observation frequency is required for Asian options",
                "observation_frequency", "asian",
            )
        if freq.strip().upper() not in _OBSERVATION_FREQUENCIES:
            return _fail(
                "Observation frequency must be DAILY, WEEKLY, or MONTHLY",
                "observation_frequency", "asian",
            )
        return Ok(None)


# ---------------------------------------------------------------------------
# FX contracts
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class FXContractValidator:
    """Forwards need a forward rate and a maturity; spots need a spot rate."""

    @property
    def product_types(self) -> frozenset[ProductType]:
        return frozenset({ProductType.FX_FORWARD, ProductType.FX_SPOT})

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        match request.product_type:
            case ProductType.FX_FORWARD:
                return self._forward(request, limits)
            case ProductType.FX_SPOT:
                if request.spot_rate is None:
                    return _fail("Spot rate is required for FX spot trades", "spot_rate", "fx_spot")
                return _require_positive(request.spot_rate, "Spot rate", "spot_rate", "fx_spot")
            case other:
                raise TypeError(f"FXContractValidator cannot validate {other}")

    @staticmethod
    def _forward(
        req: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        rate = req.forward_rate
        if rate is None:
            return _fail("Forward rate is required for FX forwards", "forward_rate", "fx_forward")
        if not rate.is_finite() or rate <= 0:
            return _fail("Forward rate must be positive", "forward_rate", "fx_forward")
        if fractional_digits(rate) > limits.rate_scale:
            return _fail(
                f"Forward rate cannot have more than {limits.rate_scale} decimal places",
                "forward_rate", "fx_forward",
            )
        if req.maturity_date is None:
            return _fail("Maturity date is required for FX forwards", "maturity_date", "fx_forward")
        assert req.trade_date is not None
        if exceeds_tenor(req.trade_date, req.maturity_date, limits.forward_max_tenor_years):
            return _fail(
                f"FX forward tenor cannot exceed {limits.forward_max_tenor_years} years",
                "maturity_date", "fx_forward",
            )
        return Ok(None)


# ---------------------------------------------------------------------------
# Swaps
# ---------------------------------------------------------------------------

_FLOATING_INDICES = member_values(FloatingRateIndex)
_PAYMENT_FREQUENCIES = member_values(PaymentFrequency)


def _payment_frequency(value: str, source: str) -> Ok[None] | Err[ValidationError]:
    if value.strip().upper() not in _PAYMENT_FREQUENCIES:
        return _fail(f"Unsupported payment frequency: {value}", "payment_frequency", source)
    return Ok(None)


@final
@dataclass(frozen=True, slots=True)
class SwapValidator:
    """Swap sub-type must agree with the product type, then per-family rules."""

    @property
    def product_types(self) -> frozenset[ProductType]:
        return frozenset(SWAP_TYPE_FOR_PRODUCT)

    def validate(
        self, request: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        product_type = request.product_type
        assert product_type is not None
        if request.swap_type is None:
            return _fail("Swap type is required for swap products", "swap_type", "swap")
        expected = SWAP_TYPE_FOR_PRODUCT[product_type]
        if request.swap_type is not expected:
            return _fail(
                f"Swap type {request.swap_type.value} does not match product type "
                f"{product_type.value}",
                "swap_type", "swap",
            )
        match product_type:
            case ProductType.FX_SWAP:
                return self._fx_swap(request)
            case ProductType.CURRENCY_SWAP:
                return self._currency_swap(request, limits)
            case ProductType.INTEREST_RATE_SWAP:
                return self._interest_rate_swap(request)
            case other:
                raise TypeError(f"SwapValidator cannot validate {other}")

    @staticmethod
    def _fx_swap(req: TradeBookingRequest) -> Ok[None] | Err[ValidationError]:
        src = "fx_swap"
        if req.near_leg_date is None or req.far_leg_date is None:
            return _fail(
                "Both near leg and far leg dates are required for FX swaps", "near_leg_date", src,
            )
        if req.near_leg_rate is None or req.far_leg_rate is None:
            return _fail(
                "Both near leg and far leg rates are required for FX swaps", "near_leg_rate", src,
            )
        if req.far_leg_date <= req.near_leg_date:
            return _fail("Far leg date must be after near leg date", "far_leg_date", src)
        checks = (
            (req.near_leg_rate, "Near leg rate", "near_leg_rate"),
            (req.far_leg_rate, "Far leg rate", "far_leg_rate"),
            (req.near_leg_amount, "Near leg amount", "near_leg_amount"),
            (req.far_leg_amount, "Far leg amount", "far_leg_amount"),
        )
        for value, label, name in checks:
            match _require_positive(value, label, name, src):
                case Err() as err:
                    return err
                case Ok():
                    pass
        return Ok(None)

    @staticmethod
    def _currency_swap(
        req: TradeBookingRequest, limits: BookingLimits,
    ) -> Ok[None] | Err[ValidationError]:
        src = "currency_swap"
        if req.maturity_date is None:
            return _fail("Maturity date is required for currency swaps", "maturity_date", src)
        assert req.trade_date is not None
        if exceeds_tenor(req.trade_date, req.maturity_date, limits.currency_swap_max_tenor_years):
            return _fail(
                f"Currency swap tenor cannot exceed {limits.currency_swap_max_tenor_years} years",
                "maturity_date", src,
            )
        if req.payment_frequency is not None:
            return _payment_frequency(req.payment_frequency, src)
        return Ok(None)

    @staticmethod
    def _interest_rate_swap(req: TradeBookingRequest) -> Ok[None] | Err[ValidationError]:
        src = "interest_rate_swap"
        if req.fixed_rate is None:
            return _fail("Fixed rate is required for interest rate swaps", "fixed_rate", src)
        if not req.fixed_rate.is_finite() or req.fixed_rate < 0:
            return _fail("Fixed rate cannot be negative", "fixed_rate", src)
        index = req.floating_rate_index
        if index is None or not index.strip():
            return _fail(
                "Floating rate index is required for interest rate swaps",
                "floating_rate_index", src,
            )
        if index.strip().upper() not in _FLOATING_INDICES:
            return _fail(
                f"Unsupported floating rate index: {index}. "
                f"Supported indices: {', '.join(_FLOATING_INDICES)}",
                "floating_rate_index", src,
            )
        if req.payment_frequency is None or not req.payment_frequency.strip():
            return _fail(
                "Payment frequency is required for interest rate swaps", "payment_frequency", src,
            )
        match _payment_frequency(req.payment_frequency, src):
            case Err() as err:
                return err
            case Ok():
                pass
        if req.maturity_date is None:
            return _fail(
                "Maturity date is required for interest rate swaps", "maturity_date", src,
            )
        return Ok(None)


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------


def default_registry() -> ProductValidatorRegistry:
    """Registry covering every ProductType. Raises RuntimeError if one is missing."""
    registry = ProductValidatorRegistry()
    registry.register(VanillaOptionValidator())
    registry.register(ExoticOptionValidator())
    registry.register(FXContractValidator())
    registry.register(SwapValidator())
    missing = registry.missing()
    if missing:
        names = ", ".join(sorted(pt.value for pt in missing))
        raise RuntimeError(f"No validator registered for product types: {names}")
    return registry


PRODUCT_VALIDATORS: ProductValidatorRegistry = default_registry()


def validate_product(
    request: TradeBookingRequest, limits: BookingLimits = DEFAULT_LIMITS,
) -> Ok[None] | Err[ValidationError]:
    return PRODUCT_VALIDATORS.validate(request, limits)
