"""Non-blocking advisories raised while validating a booking.

Validators stay pure: instead of logging, they return Advisory values
beside their verdict. The booking service decides when to emit them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import final

logger = logging.getLogger(__name__)

NON_MAJOR_CURRENCY = "NON_MAJOR_CURRENCY"
PAIR_CONVENTION = "PAIR_CONVENTION"
LARGE_NOTIONAL = "LARGE_NOTIONAL"
SHORT_TENOR = "SHORT_TENOR"
STRIKE_FAR_FROM_SPOT = "STRIKE_FAR_FROM_SPOT"
UNUSUAL_PREMIUM_CURRENCY = "UNUSUAL_PREMIUM_CURRENCY"
CREDIT_RATING = "CREDIT_RATING"


@final
@dataclass(frozen=True, slots=True)
class Advisory:
    """A warning worth surfacing to monitoring. Never rejects anything."""

    code: str
    message: str


def log_advisories(reference: str | None, advisories: Iterable[Advisory]) -> None:
    for advisory in advisories:
        logger.warning("[%s] %s: %s", reference or "-", advisory.code, advisory.message)
