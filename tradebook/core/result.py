"""Ok / Err values returned by every fallible booking step.

A rejected booking is data: the validators, the factory's callers and
the services hand back Err(ValidationError) or Err(NotFoundError) and
the caller decides whether to log, render or retry. Exceptions are kept
for programming errors.

Callers destructure with ``match``::

    match validate_common(request, today):
        case Err() as err:
            return err
        case Ok(advisories):
            pass
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, NoReturn, final


@final
@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value

    @property
    def is_ok(self) -> bool:
        return True


@final
@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def unwrap(self) -> NoReturn:
        raise RuntimeError(f"Called unwrap on Err: {self.error}")

    @property
    def is_ok(self) -> bool:
        return False


type Result[T, E] = Ok[T] | Err[E]


def unwrap[T](result: Ok[T] | Err[Any]) -> T:
    """Value of an Ok, RuntimeError for an Err. Tests and process boundaries only."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise RuntimeError(f"unwrap on Err: {error}")
        case _:
            raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def sequence[T, E](results: Iterable[Ok[T] | Err[E]]) -> Ok[list[T]] | Err[E]:
    """First Err, or Ok of every value in order.

    Consumes results lazily, so a generator of checks stops evaluating
    at the first rule that fails.
    """
    values: list[T] = []
    for r in results:
        if isinstance(r, Err):
            return r
        values.append(r.value)
    return Ok(values)
