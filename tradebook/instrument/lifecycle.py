"""Trade status state machine.

TRADE_TRANSITIONS lists every legal (from, to) edge. SETTLED, CANCELLED
and EXPIRED are terminal: no edge leaves them. The dedicated cancel
operation is stricter than a bare status update and only accepts PENDING
trades, because a confirmed trade needs a bilateral unwind instead.
"""

from __future__ import annotations

from tradebook.core.errors import ValidationError, validation_error
from tradebook.core.result import Err, Ok
from tradebook.instrument.types import TradeStatus

type TransitionTable = frozenset[tuple[TradeStatus, TradeStatus]]

TRADE_TRANSITIONS: TransitionTable = frozenset({
    (TradeStatus.PENDING, TradeStatus.CONFIRMED),
    (TradeStatus.PENDING, TradeStatus.CANCELLED),
    (TradeStatus.PENDING, TradeStatus.EXPIRED),
    (TradeStatus.CONFIRMED, TradeStatus.SETTLED),
    (TradeStatus.CONFIRMED, TradeStatus.CANCELLED),
    (TradeStatus.CONFIRMED, TradeStatus.EXPIRED),
})

INITIAL_STATUS = TradeStatus.PENDING


def allowed_targets(
    from_state: TradeStatus, transitions: TransitionTable = TRADE_TRANSITIONS,
) -> frozenset[TradeStatus]:
    return frozenset(to for (frm, to) in transitions if frm is from_state)


def check_transition(
    from_state: TradeStatus,
    to_state: TradeStatus,
    transitions: TransitionTable = TRADE_TRANSITIONS,
) -> Ok[None] | Err[ValidationError]:
    """Validate a status change against the transition table."""
    if (from_state, to_state) in transitions:
        return Ok(None)
    if from_state.is_terminal:
        message = f"Cannot change status of {from_state.value} trade"
    else:
        message = f"Invalid status transition: {from_state.value} -> {to_state.value}"
    return Err(validation_error(
        message,
        "instrument.lifecycle.check_transition",
        field="status",
        code="ILLEGAL_TRANSITION",
    ))


def check_cancellable(status: TradeStatus) -> Ok[None] | Err[ValidationError]:
    """Unilateral cancellation is only open to PENDING trades."""
    if status is TradeStatus.PENDING:
        return Ok(None)
    return Err(validation_error(
        "Only PENDING trades can be cancelled",
        "instrument.lifecycle.check_cancellable",
        field="status",
        code="ILLEGAL_TRANSITION",
    ))


def check_amendable(status: TradeStatus) -> Ok[None] | Err[ValidationError]:
    if status is TradeStatus.PENDING:
        return Ok(None)
    return Err(validation_error(
        "Only PENDING trades can be amended",
        "instrument.lifecycle.check_amendable",
        field="status",
    ))
