"""Medication catalog model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Medication:
    """A catalog medication with its default dosing instruction."""

    drug_name: str
    default_instruction: str
    code: Optional[str] = None
    """International barcode, when known."""

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name or instruction."""
        needle = term.strip().lower()
        if not needle:
            return True
        return (
            needle in (self.drug_name or "").lower()
            or needle in (self.default_instruction or "").lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drugName": self.drug_name,
            "defaultInstruction": self.default_instruction,
            "code": self.code,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Medication":
        """
        Create from a catalog row.

        Accepts both the catalog export's column names (DrugName, Instruction,
        InternationalCode) and our own camelCase keys.
        """
        return cls(
            drug_name=data.get("DrugName", data.get("drugName", "")),
            default_instruction=data.get("Instruction", data.get("defaultInstruction", "")),
            code=data.get("InternationalCode", data.get("code")) or None,
        )
