"""Caller-facing response envelope.

ApiResponse is what a transport (HTTP handler, workflow activity) hands
back: a success flag, a human message, an optional payload and, on
failure, the machine-readable error detail from the error value.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, final

from tradebook.core.errors import BookingError
from tradebook.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class ApiResponse:
    success: bool
    message: str
    data: Any = None
    error: dict[str, object] | None = None

    @staticmethod
    def ok(data: Any = None, message: str = "Operation successful") -> ApiResponse:
        return ApiResponse(success=True, message=message, data=data)

    @staticmethod
    def failure(error: BookingError) -> ApiResponse:
        return ApiResponse(success=False, message=error.message, error=error.to_dict())

    @staticmethod
    def from_result(
        result: Ok[Any] | Err[BookingError],
        success_message: str,
        render: Callable[[Any], Any] | None = None,
    ) -> ApiResponse:
        """Ok becomes success with the (optionally rendered) value, Err a failure."""
        match result:
            case Ok(value):
                return ApiResponse.ok(render(value) if render else value, success_message)
            case Err(error):
                return ApiResponse.failure(error)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"success": self.success, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        return out
