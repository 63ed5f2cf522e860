"""
Print orchestration: one print action from validation to basket reset.

State machine:
    IDLE -> VALIDATING -> RENDERING -> AUDITING -> RESETTING -> IDLE
    IDLE -> VALIDATING -> BLOCKED -> IDLE        (precondition failed)
    IDLE -> VALIDATING -> RENDERING -> IDLE      (render failed)

Ordering rules:
    1. Preconditions are checked in a fixed order and the first failure is
       raised before anything changes: patient, non-empty basket, expiry on
       every entry, authenticated operator.
    2. Labels are rendered before anything is recorded. A render failure
       leaves basket and audit log untouched, so the print can be retried.
    3. The audit batch is written from the pre-render snapshot.
    4. The basket is cleared. If the audit append failed, the labels already
       exist, so by default the basket is still cleared and the failure is
       returned as a warning (clear_on_audit_failure=False keeps the basket).

Usage:
    orchestrator = PrintOrchestrator(renderer, ledger)
    outcome = orchestrator.print(session)
    if outcome.warnings:
        # audit not written
"""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from core.exceptions import (
    AuditAppendFailureError,
    EmptyBasketError,
    IncompleteExpiryError,
    NoPatientSelectedError,
    NotAuthenticatedError,
    PrintPreconditionError,
    RenderFailureError,
)
from models.audit import PrintContext
from models.basket import FrozenBasketEntry
from models.identity import Patient
from models.print_result import PrintOutcome, PrintState, PrintStatus
from services.audit_ledger import AuditLedger
from services.session_registry import Session
from logging_config import get_logger, get_print_logger


# Module logger
logger = get_logger(__name__)


class LabelRenderer(Protocol):
    """Anything that can turn a basket snapshot into printable labels."""

    def render(
        self,
        patient: Patient,
        entries: Sequence[FrozenBasketEntry],
        print_quantity: int,
        print_session_id: Optional[str] = None,
    ) -> None:
        ...


class PrintSessionIdFactory:
    """
    Millisecond-timestamp print session ids, strictly increasing.

    Two prints in the same millisecond get consecutive values instead of
    the same id.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            value = max(int(self._clock() * 1000), self._last + 1)
            self._last = value
            return str(value)


class PrintOrchestrator:
    """
    Coordinates validation, rendering, audit and basket reset.

    One instance serves every session. Run state is kept per thread, so
    concurrent requests each see only their own transitions.

    Attributes:
        state: Current state of this thread's run; IDLE between print actions
        transitions: States visited by this thread's last run
    """

    def __init__(
        self,
        renderer: LabelRenderer,
        ledger: AuditLedger,
        clear_on_audit_failure: bool = True,
        session_id_factory: Optional[Callable[[], str]] = None,
    ):
        self._renderer = renderer
        self._ledger = ledger
        self._clear_on_audit_failure = clear_on_audit_failure
        self._new_session_id = session_id_factory or PrintSessionIdFactory()
        self._run = threading.local()

    @property
    def state(self) -> PrintState:
        return getattr(self._run, "state", PrintState.IDLE)

    @property
    def transitions(self) -> Tuple[PrintState, ...]:
        return tuple(getattr(self._run, "transitions", ()))

    def _enter(self, state: PrintState) -> None:
        self._run.state = state
        self._run.transitions.append(state)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def check(session: Session) -> None:
        """
        Raise the first failing precondition, or return if printing may go ahead.

        Has no side effects; also used to report readiness before printing.

        Raises:
            NoPatientSelectedError, EmptyBasketError, IncompleteExpiryError,
            NotAuthenticatedError
        """
        if session.patient is None:
            raise NoPatientSelectedError()

        if not session.basket:
            raise EmptyBasketError()

        missing = session.basket.missing_expiry()
        if missing:
            raise IncompleteExpiryError(missing)

        if session.operator is None:
            raise NotAuthenticatedError()

    # -------------------------------------------------------------------------
    # Print
    # -------------------------------------------------------------------------

    def print(self, session: Session) -> PrintOutcome:
        """
        Run one print action for the session.

        Returns:
            PrintOutcome (status PRINTED or PRINTED_WITH_WARNINGS)

        Raises:
            PrintPreconditionError subclasses: nothing was changed
            RenderFailureError: nothing was changed, safe to retry
        """
        self._run.state = PrintState.IDLE
        self._run.transitions = [PrintState.IDLE]
        self._enter(PrintState.VALIDATING)

        try:
            self.check(session)
        except PrintPreconditionError:
            self._enter(PrintState.BLOCKED)
            self._enter(PrintState.IDLE)
            raise

        print_session_id = self._new_session_id()
        print_logger = get_print_logger(print_session_id)

        snapshot = tuple(entry.freeze() for entry in session.basket.list())
        quantity = session.print_quantity
        context = PrintContext.create(
            print_session_id=print_session_id,
            patient=session.patient,
            operator=session.operator,
            print_quantity=quantity,
        )

        # Render
        self._enter(PrintState.RENDERING)
        try:
            self._renderer.render(session.patient, snapshot, quantity, print_session_id)
        except Exception as e:
            print_logger.error(f"Rendering failed: {e}", exc_info=True)
            self._enter(PrintState.IDLE)
            raise RenderFailureError(str(e), print_session_id) from e

        label_count = len(snapshot) * quantity
        print_logger.info(
            f"Rendered {label_count} labels for {len(snapshot)} medications "
            f"(patient {session.patient.full_id})"
        )

        # Audit
        self._enter(PrintState.AUDITING)
        warnings: List[str] = []
        records = []
        try:
            records = self._ledger.append_batch(snapshot, context)
        except AuditAppendFailureError as e:
            print_logger.warning(f"Labels printed without audit record: {e.message}")
            warnings.append(e.message)
        except Exception as e:
            failure = AuditAppendFailureError(str(e), print_session_id, len(snapshot))
            print_logger.error(f"Unexpected audit error: {e}", exc_info=True)
            warnings.append(failure.message)

        # Reset
        self._enter(PrintState.RESETTING)
        cleared = True
        if records or self._clear_on_audit_failure:
            session.basket.clear()
        else:
            cleared = False
            print_logger.warning("Basket kept because the audit batch was not written")

        self._enter(PrintState.IDLE)

        outcome = PrintOutcome(
            print_session_id=print_session_id,
            status=PrintStatus.PRINTED_WITH_WARNINGS if warnings else PrintStatus.PRINTED,
            records=records,
            label_count=label_count,
            warnings=warnings,
            transitions=self.transitions,
            basket_cleared=cleared,
        )
        print_logger.info(f"Print finished: {outcome.status.value}")
        return outcome
