"""Error value hierarchy for trade booking.

Every error is a frozen dataclass value that can be pattern-matched,
serialised and logged. Two kinds reach callers as recoverable rejections
(ValidationError, NotFoundError); PersistenceError is produced by storage
adapters and InternalError wraps anything unexpected.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from tradebook.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class BookingError:
    """Base error value. Not @final: the concrete errors subclass it."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> BookingError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class ValidationError(BookingError):
    """A business rule was broken. message names the rule."""

    field: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {**BookingError.to_dict(self), "field": self.field}


@final
@dataclass(frozen=True, slots=True)
class NotFoundError(BookingError):
    """Unknown trade id, trade reference or counterparty id."""

    entity: str = ""
    key: str = ""

    def to_dict(self) -> dict[str, object]:
        return {**BookingError.to_dict(self), "entity": self.entity, "key": self.key}


@final
@dataclass(frozen=True, slots=True)
class PersistenceError(BookingError):
    """Storage operation failed.

    constraint is set when a uniqueness constraint rejected the write.
    """

    operation: str = ""
    constraint: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            **BookingError.to_dict(self),
            "operation": self.operation,
            "constraint": self.constraint,
        }


@final
@dataclass(frozen=True, slots=True)
class InternalError(BookingError):
    """Unexpected failure. Details stay in the logs, not in message."""

    cause: str = ""

    def to_dict(self) -> dict[str, object]:
        return {**BookingError.to_dict(self), "cause": self.cause}


type UserFacingError = ValidationError | NotFoundError | InternalError


def validation_error(
    message: str, source: str, *, field: str | None = None, code: str = "VALIDATION",
) -> ValidationError:
    """Build a ValidationError stamped with the current time."""
    return ValidationError(
        message=message,
        code=code,
        timestamp=UtcDatetime.now(),
        source=source,
        field=field,
    )


def not_found(entity: str, key: object, source: str, *, by: str = "ID") -> NotFoundError:
    """Build a NotFoundError with the standard "<entity> not found with <by>: <key>" text."""
    return NotFoundError(
        message=f"{entity} not found with {by}: {key}",
        code="NOT_FOUND",
        timestamp=UtcDatetime.now(),
        source=source,
        entity=entity,
        key=str(key),
    )


def internal_error(cause: str, source: str) -> InternalError:
    return InternalError(
        message="Operation failed due to an unexpected error",
        code="INTERNAL",
        timestamp=UtcDatetime.now(),
        source=source,
        cause=cause,
    )
