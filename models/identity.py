"""
Identity models: the operator doing the printing and the patient being
labelled. Both are resolved by collaborators and attached to a Session.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class Operator:
    """An authenticated pharmacy operator."""

    user_id: str
    """Stable user identifier from the users file."""

    full_name: str
    """Display name, recorded as printed_by in the audit log."""

    username: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.user_id, "fullName": self.full_name, "username": self.username}


@dataclass(frozen=True)
class Patient:
    """
    A resolved patient record.

    Patients are identified by an id that is only unique within a
    registration year, hence the pair.
    """

    patient_id: str
    year: str
    name: str
    national_id: str = ""

    @property
    def full_id(self) -> str:
        """Identifier printed on the label header, e.g. "1234/2025"."""
        return f"{self.patient_id}/{self.year}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["full_id"] = self.full_id
        return data
