"""Workflow and activity I/O types.

All types are @final frozen dataclasses made of JSON-friendly fields
(str, int, bool, dict), so Temporal's default data converter carries
them without a custom payload codec.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, final


@final
@dataclass(frozen=True, slots=True)
class BookTradeInput:
    """Raw booking request as received from the caller.

    request is parsed inside the activity, so a malformed payload becomes
    a failed BookingOutcome rather than a workflow decode error.
    """

    request: dict[str, Any] = field(default_factory=dict)


@final
@dataclass(frozen=True, slots=True)
class StatusUpdateInput:
    """Move a trade to new_status. cancel=True uses the stricter cancel rule."""

    trade_id: int
    new_status: str = "CANCELLED"
    cancel: bool = False


@final
@dataclass(frozen=True, slots=True)
class CancelTradeInput:
    trade_id: int


@final
@dataclass(frozen=True, slots=True)
class BookingOutcome:
    """Result of a booking or status activity."""

    success: bool
    message: str
    trade_id: int | None = None
    trade_reference: str | None = None
    status: str | None = None
    error_code: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.error_code is not None:
            raise TypeError("successful BookingOutcome cannot carry an error_code")
        if not self.success and self.error_code is None:
            raise TypeError("failed BookingOutcome must carry an error_code")
