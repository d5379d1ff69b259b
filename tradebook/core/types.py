"""Audit timestamps and the Clock services read them from."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import final


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """created_at / updated_at stamp. Aware datetimes only, stored in UTC."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")
        if self.value.utcoffset() != timedelta(0):
            object.__setattr__(self, "value", self.value.astimezone(UTC))

    @staticmethod
    def now() -> UtcDatetime:
        return UtcDatetime(value=datetime.now(tz=UTC))

    @property
    def date(self) -> date:
        """Business date of the stamp, used as "today" by the validators."""
        return self.value.date()

    def isoformat(self) -> str:
        return self.value.isoformat()


# Services take a Clock so tests can pin "today".
type Clock = Callable[[], UtcDatetime]


def fixed_clock(at: datetime) -> Clock:
    """Clock that always returns the same instant. Naive input is read as UTC."""
    stamp = UtcDatetime(value=at if at.tzinfo is not None else at.replace(tzinfo=UTC))
    return lambda: stamp
