"""Validated identifier newtypes for counterparties: LEI, BIC, counterparty code.

Each wraps a normalised (stripped, upper-cased) string validated at
construction time via parse().
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import final

from tradebook.core.result import Err, Ok

_BIC_PATTERN = re.compile(r"^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$")
_CODE_PATTERN = re.compile(r"^[A-Z0-9]{3,10}$")


@final
@dataclass(frozen=True, slots=True)
class LEI:
    """Legal Entity Identifier: exactly 20 alphanumeric characters."""

    value: str

    @staticmethod
    def parse(raw: str) -> Ok[LEI] | Err[str]:
        norm = raw.strip().upper()
        if len(norm) != 20 or not norm.isalnum():
            return Err("Invalid LEI code format. LEI must be 20 alphanumeric characters")
        return Ok(LEI(value=norm))


@final
@dataclass(frozen=True, slots=True)
class BIC:
    """SWIFT/BIC code: 8 or 11 characters, 6-letter institution+country prefix."""

    value: str

    @staticmethod
    def parse(raw: str) -> Ok[BIC] | Err[str]:
        norm = raw.strip().upper()
        if not _BIC_PATTERN.match(norm):
            return Err("Invalid SWIFT code format. SWIFT code must be 8 or 11 characters")
        return Ok(BIC(value=norm))


@final
@dataclass(frozen=True, slots=True)
class CounterpartyCode:
    """Short internal counterparty mnemonic, 3-10 alphanumerics."""

    value: str

    @staticmethod
    def parse(raw: str) -> Ok[CounterpartyCode] | Err[str]:
        norm = raw.strip().upper()
        if not _CODE_PATTERN.match(norm):
            return Err("Counterparty code must be 3-10 alphanumeric characters")
        return Ok(CounterpartyCode(value=norm))
