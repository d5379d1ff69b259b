"""In-memory implementations of the repository protocols.

Test doubles that let the whole suite run without a database. They
assign sequential ids and enforce the same uniqueness keys a relational
schema would. All classes are @final. None of them are production code.
"""

from __future__ import annotations

from dataclasses import replace
from typing import final

from tradebook.core.errors import PersistenceError
from tradebook.core.result import Err, Ok
from tradebook.core.types import UtcDatetime
from tradebook.infra.protocols import (
    COUNTERPARTY_CODE_CONSTRAINT,
    COUNTERPARTY_LEI_CONSTRAINT,
    TRADE_REFERENCE_CONSTRAINT,
)
from tradebook.instrument.trade import Counterparty, Trade


def _persistence_error(
    operation: str, detail: str, constraint: str | None = None,
) -> PersistenceError:
    return PersistenceError(
        message=detail,
        code="CONSTRAINT_VIOLATION" if constraint else "PERSISTENCE_ERROR",
        timestamp=UtcDatetime.now(),
        source=f"memory_adapter.{operation}",
        operation=operation,
        constraint=constraint,
    )


@final
class InMemoryTradeRepository:
    """Trades keyed by id with a unique index on trade_reference."""

    def __init__(self) -> None:
        self._trades: dict[int, Trade] = {}
        self._by_reference: dict[str, int] = {}
        self._next_id = 1
        self._pending_failure: PersistenceError | None = None

    def save(self, trade: Trade) -> Ok[Trade] | Err[PersistenceError]:
        if self._pending_failure is not None:
            failure, self._pending_failure = self._pending_failure, None
            return Err(failure)

        owner = self._by_reference.get(trade.trade_reference)
        if owner is not None and owner != trade.trade_id:
            return Err(_persistence_error(
                "save",
                f"Duplicate trade_reference: {trade.trade_reference}",
                TRADE_REFERENCE_CONSTRAINT,
            ))

        if trade.trade_id is None:
            stored = replace(trade, trade_id=self._next_id)
            self._next_id += 1
        elif trade.trade_id in self._trades:
            stored = trade
            previous = self._trades[trade.trade_id]
            if previous.trade_reference != trade.trade_reference:
                del self._by_reference[previous.trade_reference]
        else:
            return Err(_persistence_error("save", f"Unknown trade_id: {trade.trade_id}"))

        assert stored.trade_id is not None
        self._trades[stored.trade_id] = stored
        self._by_reference[stored.trade_reference] = stored.trade_id
        return Ok(stored)

    def find_by_id(self, trade_id: int) -> Ok[Trade | None] | Err[PersistenceError]:
        return Ok(self._trades.get(trade_id))

    def find_by_reference(self, reference: str) -> Ok[Trade | None] | Err[PersistenceError]:
        trade_id = self._by_reference.get(reference)
        return Ok(None if trade_id is None else self._trades[trade_id])

    def exists_by_reference(self, reference: str) -> Ok[bool] | Err[PersistenceError]:
        return Ok(reference in self._by_reference)

    def find_all(self) -> Ok[tuple[Trade, ...]] | Err[PersistenceError]:
        return Ok(tuple(self._trades.values()))

    def fail_next_save(self, error: PersistenceError) -> None:
        """Test-only helper: the next save() returns Err(error) untouched."""
        self._pending_failure = error

    def count(self) -> int:
        """Test-only helper."""
        return len(self._trades)


@final
class InMemoryCounterpartyRepository:
    """Counterparties keyed by id with unique code and LEI."""

    def __init__(self) -> None:
        self._rows: dict[int, Counterparty] = {}
        self._next_id = 1

    def _conflict(self, counterparty: Counterparty) -> PersistenceError | None:
        for row in self._rows.values():
            if row.counterparty_id == counterparty.counterparty_id:
                continue
            if row.counterparty_code == counterparty.counterparty_code:
                return _persistence_error(
                    "save",
                    f"Duplicate counterparty_code: {counterparty.counterparty_code}",
                    COUNTERPARTY_CODE_CONSTRAINT,
                )
            if counterparty.lei_code is not None and row.lei_code == counterparty.lei_code:
                return _persistence_error(
                    "save",
                    f"Duplicate lei_code: {counterparty.lei_code}",
                    COUNTERPARTY_LEI_CONSTRAINT,
                )
        return None

    def save(self, counterparty: Counterparty) -> Ok[Counterparty] | Err[PersistenceError]:
        conflict = self._conflict(counterparty)
        if conflict is not None:
            return Err(conflict)
        if counterparty.counterparty_id is None:
            stored = replace(counterparty, counterparty_id=self._next_id)
            self._next_id += 1
        elif counterparty.counterparty_id in self._rows:
            stored = counterparty
        else:
            return Err(_persistence_error(
                "save", f"Unknown counterparty_id: {counterparty.counterparty_id}",
            ))
        assert stored.counterparty_id is not None
        self._rows[stored.counterparty_id] = stored
        return Ok(stored)

    def find_by_id(self, counterparty_id: int) -> Ok[Counterparty | None] | Err[PersistenceError]:
        return Ok(self._rows.get(counterparty_id))

    def find_by_code(self, code: str) -> Ok[Counterparty | None] | Err[PersistenceError]:
        return Ok(next((c for c in self._rows.values() if c.counterparty_code == code), None))

    def find_by_lei(self, lei_code: str) -> Ok[Counterparty | None] | Err[PersistenceError]:
        return Ok(next((c for c in self._rows.values() if c.lei_code == lei_code), None))

    def find_all(self) -> Ok[tuple[Counterparty, ...]] | Err[PersistenceError]:
        return Ok(tuple(self._rows.values()))

    def count(self) -> int:
        """Test-only helper."""
        return len(self._rows)
