"""
Print run result models.

These models describe what a single print action did: the states the
orchestrator went through, the audit records written, and any non-fatal
warnings (an audit append that failed after labels were produced).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Tuple

from .audit import AuditRecord


class PrintState(Enum):
    """
    Orchestrator states.

    Lifecycle:
        IDLE -> VALIDATING -> RENDERING -> AUDITING -> RESETTING -> IDLE
        IDLE -> VALIDATING -> BLOCKED -> IDLE   (precondition failure)
    """

    IDLE = "idle"
    VALIDATING = "validating"
    BLOCKED = "blocked"
    RENDERING = "rendering"
    AUDITING = "auditing"
    RESETTING = "resetting"


class PrintStatus(Enum):
    """Overall status of a successful print action."""

    PRINTED = "printed"
    """Labels rendered, audit written, basket cleared."""

    PRINTED_WITH_WARNINGS = "printed_with_warnings"
    """Labels rendered but the audit batch could not be written."""


@dataclass
class PrintOutcome:
    """
    Result of PrintOrchestrator.print().

    Only returned when labels were rendered; precondition and render failures
    are raised instead.
    """

    print_session_id: str
    """Token shared by every audit record of this print action."""

    status: PrintStatus
    """PRINTED or PRINTED_WITH_WARNINGS."""

    records: List[AuditRecord] = field(default_factory=list)
    """Audit records appended (empty when the audit append failed)."""

    label_count: int = 0
    """Physical labels rendered (entries x print quantity)."""

    warnings: List[str] = field(default_factory=list)
    """Non-fatal problems, e.g. audit append failure."""

    transitions: Tuple[PrintState, ...] = ()
    """States visited during the run, starting and ending with IDLE."""

    basket_cleared: bool = True
    """False only when the strict audit policy kept the basket."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "printSessionId": self.print_session_id,
            "status": self.status.value,
            "labelCount": self.label_count,
            "recordCount": len(self.records),
            "records": [r.to_dict() for r in self.records],
            "warnings": list(self.warnings),
            "transitions": [s.value for s in self.transitions],
            "basketCleared": self.basket_cleared,
        }
