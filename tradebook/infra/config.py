"""Runtime configuration: booking limits, Temporal connection, logging.

Pure configuration data plus load_config(), which reads TRADEBOOK_*
environment variables. Every threshold the validators and the business
logic service compare against lives in BookingLimits, so tests can
tighten or relax a single rule without patching module globals.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import final

from tradebook.core.errors import ValidationError, validation_error
from tradebook.core.result import Err, Ok

# ---------------------------------------------------------------------------
# Booking limits
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class BookingLimits:
    """Thresholds for validation, advisories and default premium."""

    max_reference_length: int = 50
    min_notional: Decimal = Decimal("10000.00")
    max_notional: Decimal = Decimal("1000000000.00")
    notional_scale: int = 2
    min_rate: Decimal = Decimal("0.000001")        # strike and spot, exclusive
    max_strike: Decimal = Decimal("1000000.00")
    rate_scale: int = 6
    premium_scale: int = 2
    max_trade_date_skew_days: int = 1
    min_settlement_lag_days: int = 1
    max_tenor_years: int = 10
    vanilla_max_tenor_years: int = 5
    forward_max_tenor_years: int = 2
    currency_swap_max_tenor_years: int = 10
    # advisories
    large_notional_advisory: Decimal = Decimal("100000000")
    short_tenor_days: int = 7
    strike_spot_lower: Decimal = Decimal("0.5")
    strike_spot_upper: Decimal = Decimal("1.5")
    # business logic
    large_trade_threshold: Decimal = Decimal("10000000")
    default_premium_rate: Decimal = Decimal("0.02")
    day_count_basis: int = 365
    # queries
    max_query_range_years: int = 1
    # counterparties
    max_counterparty_name_length: int = 100
    max_credit_rating_length: int = 10

    def __post_init__(self) -> None:
        if self.min_notional > self.max_notional:
            raise TypeError(
                f"min_notional ({self.min_notional}) must be <= "
                f"max_notional ({self.max_notional})"
            )
        if self.strike_spot_lower >= self.strike_spot_upper:
            raise TypeError("strike_spot_lower must be < strike_spot_upper")
        if self.day_count_basis <= 0:
            raise TypeError(f"day_count_basis must be > 0, got {self.day_count_basis}")


DEFAULT_LIMITS = BookingLimits()


# ---------------------------------------------------------------------------
# Temporal and logging
# ---------------------------------------------------------------------------

TASK_QUEUE = "trade-booking"


@final
@dataclass(frozen=True, slots=True)
class TemporalConfig:
    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE
    activity_threads: int = 8


@final
@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"


@final
@dataclass(frozen=True, slots=True)
class AppConfig:
    limits: BookingLimits = field(default_factory=BookingLimits)
    temporal: TemporalConfig = field(default_factory=TemporalConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_error(name: str, value: str) -> Err[ValidationError]:
    return Err(validation_error(
        f"Invalid {name}: {value}", "infra.config.load_config", field=name,
        code="CONFIG",
    ))


def load_config(env: Mapping[str, str] | None = None) -> Ok[AppConfig] | Err[ValidationError]:
    """Build AppConfig from TRADEBOOK_* variables, defaults elsewhere.

    env defaults to os.environ. Blank values count as unset.
    """
    source = os.environ if env is None else env

    def _get(name: str) -> str | None:
        raw = source.get(name)
        if raw is None or not raw.strip():
            return None
        return raw.strip()

    logging_cfg = LoggingConfig()
    level = _get("TRADEBOOK_LOG_LEVEL")
    if level is not None:
        if level.upper() not in _LOG_LEVELS:
            return _env_error("TRADEBOOK_LOG_LEVEL", level)
        logging_cfg = replace(logging_cfg, level=level.upper())

    temporal_cfg = TemporalConfig()
    host = _get("TRADEBOOK_TEMPORAL_HOST")
    if host is not None:
        if ":" not in host:
            return _env_error("TRADEBOOK_TEMPORAL_HOST", host)
        temporal_cfg = replace(temporal_cfg, target_host=host)
    namespace = _get("TRADEBOOK_TEMPORAL_NAMESPACE")
    if namespace is not None:
        temporal_cfg = replace(temporal_cfg, namespace=namespace)
    queue = _get("TRADEBOOK_TASK_QUEUE")
    if queue is not None:
        temporal_cfg = replace(temporal_cfg, task_queue=queue)
    threads_raw = _get("TRADEBOOK_ACTIVITY_THREADS")
    if threads_raw is not None:
        if not threads_raw.isascii() or not threads_raw.isdigit() or int(threads_raw) < 1:
            return _env_error("TRADEBOOK_ACTIVITY_THREADS", threads_raw)
        temporal_cfg = replace(temporal_cfg, activity_threads=int(threads_raw))

    limits = BookingLimits()
    rate_raw = _get("TRADEBOOK_DEFAULT_PREMIUM_RATE")
    if rate_raw is not None:
        try:
            rate = Decimal(rate_raw)
        except InvalidOperation:
            return _env_error("TRADEBOOK_DEFAULT_PREMIUM_RATE", rate_raw)
        if not rate.is_finite() or rate <= 0 or rate >= 1:
            return _env_error("TRADEBOOK_DEFAULT_PREMIUM_RATE", rate_raw)
        limits = replace(limits, default_premium_rate=rate)

    return Ok(AppConfig(limits=limits, temporal=temporal_cfg, logging=logging_cfg))


def configure_logging(config: LoggingConfig) -> None:
    """Install a root stream handler with the configured level and format."""
    logging.basicConfig(level=config.level, format=config.format, force=True)
