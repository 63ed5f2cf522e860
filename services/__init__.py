"""
Services layer for LabelPrintWeb.

This module contains the basket/print lifecycle:
- BasketStore: Ordered basket entries for one session
- AuditLedger: Durable, whole-batch append-only print log
- SessionRegistry / Session: Operator sessions created on login
- PrintOrchestrator: Validate -> render -> audit -> reset state machine

Flow:
    Operator logs in (Session created) -> patient search sets session.patient
    -> basket.add() / expiry.set_month() / expiry.set_year()
    -> PrintOrchestrator.print(session) -> labels spooled, audit appended,
    basket cleared
"""

from .basket_store import BasketStore
from .audit_ledger import AuditLedger
from .session_registry import Session, SessionRegistry
from .print_orchestrator import PrintOrchestrator, PrintSessionIdFactory

__all__ = [
    "BasketStore",
    "AuditLedger",
    "Session",
    "SessionRegistry",
    "PrintOrchestrator",
    "PrintSessionIdFactory",
]
