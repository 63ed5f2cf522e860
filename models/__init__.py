"""
Data models for LabelPrintWeb.

This module contains dataclasses for:
- BasketEntry: A medication waiting to be labelled (mutable expiry)
- FrozenBasketEntry: Immutable print-time snapshot of an entry
- Patient / Operator: Identities attached to a session
- Medication: Catalog row
- AuditRecord / PrintContext: Audit log entries and the facts shared by a batch
- PrintOutcome / PrintState / PrintStatus: Result of a print action

Snapshots handed to rendering and audit are frozen so that later basket
edits can not change what was recorded as printed.
"""

from .basket import BasketEntry, FrozenBasketEntry
from .identity import Operator, Patient
from .medication import Medication
from .audit import AuditRecord, AuditStatus, PrintContext
from .print_result import PrintOutcome, PrintState, PrintStatus

__all__ = [
    # Basket models
    "BasketEntry",
    "FrozenBasketEntry",
    # Identity models
    "Operator",
    "Patient",
    # Catalog models
    "Medication",
    # Audit models
    "AuditRecord",
    "AuditStatus",
    "PrintContext",
    # Print models
    "PrintOutcome",
    "PrintState",
    "PrintStatus",
]
