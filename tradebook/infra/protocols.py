"""Repository protocols consumed by the booking services.

Services depend on these abstractions; storage adapters implement them.
Every method returns Ok[T] | Err[PersistenceError]. A lookup that finds
nothing is Ok(None), not an error: turning absence into NotFoundError is
the service's decision.

save() assigns an id to a new record and enforces uniqueness. A
uniqueness violation comes back as PersistenceError with constraint set
to the name of the violated key.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tradebook.core.errors import PersistenceError
from tradebook.core.result import Err, Ok
from tradebook.instrument.trade import Counterparty, Trade

TRADE_REFERENCE_CONSTRAINT = "uk_trade_reference"
COUNTERPARTY_CODE_CONSTRAINT = "uk_counterparty_code"
COUNTERPARTY_LEI_CONSTRAINT = "uk_counterparty_lei"


@runtime_checkable
class TradeRepository(Protocol):
    """Trade storage. trade_reference is unique across all trades."""

    def save(self, trade: Trade) -> Ok[Trade] | Err[PersistenceError]: ...

    def find_by_id(self, trade_id: int) -> Ok[Trade | None] | Err[PersistenceError]: ...

    def find_by_reference(
        self, reference: str,
    ) -> Ok[Trade | None] | Err[PersistenceError]: ...

    def exists_by_reference(self, reference: str) -> Ok[bool] | Err[PersistenceError]: ...

    def find_all(self) -> Ok[tuple[Trade, ...]] | Err[PersistenceError]: ...


@runtime_checkable
class CounterpartyRepository(Protocol):
    """Counterparty storage. counterparty_code and lei_code are unique."""

    def save(
        self, counterparty: Counterparty,
    ) -> Ok[Counterparty] | Err[PersistenceError]: ...

    def find_by_id(
        self, counterparty_id: int,
    ) -> Ok[Counterparty | None] | Err[PersistenceError]: ...

    def find_by_code(
        self, code: str,
    ) -> Ok[Counterparty | None] | Err[PersistenceError]: ...

    def find_by_lei(
        self, lei_code: str,
    ) -> Ok[Counterparty | None] | Err[PersistenceError]: ...

    def find_all(self) -> Ok[tuple[Counterparty, ...]] | Err[PersistenceError]: ...
