"""
Basket data models.

A basket entry is one medication the operator intends to label for the
current patient. Entries are mutable while they sit in the basket (expiry is
set after adding); use freeze() for the snapshot handed to rendering and audit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any

from core.expiry import format_expiry


@dataclass
class BasketEntry:
    """
    A medication waiting to be labelled.

    expiry_date is computed from expiry_month and expiry_year and is never
    stored, so the three can not drift apart.
    """

    id: str
    """Opaque token assigned by BasketStore, stable for the entry's lifetime."""

    drug_name: str
    """Medication name printed on the label."""

    instruction_text: str
    """Dosing instruction (catalog default or operator override)."""

    expiry_month: str = ""
    """Two-digit month ("01".."12"), empty when unset."""

    expiry_year: str = ""
    """Two-digit year ("26".."50"), empty when unset."""

    @property
    def expiry_date(self) -> str:
        """"MM/YY" when both parts are set, otherwise ""."""
        return format_expiry(self.expiry_month, self.expiry_year)

    @property
    def has_expiry(self) -> bool:
        return bool(self.expiry_date)

    def freeze(self) -> "FrozenBasketEntry":
        """Create an immutable snapshot of this entry."""
        return FrozenBasketEntry(
            id=self.id,
            drug_name=self.drug_name,
            instruction_text=self.instruction_text,
            expiry_date=self.expiry_date,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "id": self.id,
            "drugName": self.drug_name,
            "instructionText": self.instruction_text,
            "expiryMonth": self.expiry_month,
            "expiryYear": self.expiry_year,
            "expiryDate": self.expiry_date,
        }


@dataclass(frozen=True)
class FrozenBasketEntry:
    """
    Immutable snapshot of a basket entry at print time.

    The renderer and the audit ledger only ever see these, so clearing or
    editing the live basket afterwards can not change what was printed.
    """

    id: str
    drug_name: str
    instruction_text: str
    expiry_date: str
