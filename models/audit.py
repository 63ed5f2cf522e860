"""
Audit data models.

An AuditRecord proves that one label set was printed for one basket entry.
Records are frozen: once appended to the ledger they are never edited.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional

from .identity import Operator, Patient


class AuditStatus(Enum):
    """Status recorded on an audit record."""

    PRINTED = "printed"


@dataclass(frozen=True)
class PrintContext:
    """
    Session facts captured once per print action and shared by every record
    of the batch.
    """

    print_session_id: str
    timestamp: datetime
    patient: Patient
    operator: Operator
    print_quantity: int

    @classmethod
    def create(
        cls,
        print_session_id: str,
        patient: Patient,
        operator: Operator,
        print_quantity: int,
        timestamp: Optional[datetime] = None,
    ) -> "PrintContext":
        return cls(
            print_session_id=print_session_id,
            timestamp=timestamp or datetime.now(timezone.utc),
            patient=patient,
            operator=operator,
            print_quantity=print_quantity,
        )


@dataclass(frozen=True)
class AuditRecord:
    """One immutable audit log entry."""

    id: str
    """"{print_session_id}-{index}", unique within the ledger."""

    timestamp: str
    """ISO-8601 timestamp of the print action."""

    print_session_id: str
    patient_id: str
    patient_year: str
    patient_name: str
    drug_name: str
    instruction_text: str
    printed_by: str
    expiry_date: str
    print_quantity: int
    status: str = AuditStatus.PRINTED.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the JSON log file."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditRecord":
        """
        Create from a stored dictionary.

        Raises:
            KeyError: If a required field is missing (treated as corruption)
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            print_session_id=data["print_session_id"],
            patient_id=str(data.get("patient_id", "")),
            patient_year=str(data.get("patient_year", "")),
            patient_name=data.get("patient_name", ""),
            drug_name=data["drug_name"],
            instruction_text=data.get("instruction_text", ""),
            printed_by=data.get("printed_by", ""),
            expiry_date=data.get("expiry_date", ""),
            print_quantity=int(data.get("print_quantity", 1)),
            status=data.get("status", AuditStatus.PRINTED.value),
        )
