"""
Unit tests for the PrintOrchestrator state machine.
"""

import threading
from unittest.mock import MagicMock

import pytest

from core import expiry
from core.exceptions import (
    AuditAppendFailureError,
    EmptyBasketError,
    IncompleteExpiryError,
    NoPatientSelectedError,
    NotAuthenticatedError,
    RenderFailureError,
)
from models.print_result import PrintState, PrintStatus
from services.print_orchestrator import PrintOrchestrator, PrintSessionIdFactory
from services.session_registry import SessionRegistry


# Fixtures

@pytest.fixture
def renderer():
    """Renderer mock that records calls."""
    return MagicMock()


@pytest.fixture
def orchestrator(renderer, ledger):
    return PrintOrchestrator(renderer, ledger)


def add_with_expiry(session, drug_name, month="01", year="26"):
    entry = session.basket.add(drug_name, "Take as directed")
    expiry.set_month(entry, month)
    expiry.set_year(entry, year)
    return entry


SUCCESS_PATH = (
    PrintState.IDLE,
    PrintState.VALIDATING,
    PrintState.RENDERING,
    PrintState.AUDITING,
    PrintState.RESETTING,
    PrintState.IDLE,
)

BLOCKED_PATH = (PrintState.IDLE, PrintState.VALIDATING, PrintState.BLOCKED, PrintState.IDLE)


class TestSuccessfulPrint:
    """Render, audit, then clear."""

    def test_single_entry_scenario(self, orchestrator, renderer, ledger, label_session):
        add_with_expiry(label_session, "Amoxicillin", "01", "26")
        label_session.set_print_quantity(2)
        before = ledger.count()

        outcome = orchestrator.print(label_session)

        assert outcome.status == PrintStatus.PRINTED
        records = ledger.load_all()
        assert len(records) == before + 1
        assert records[-1].drug_name == "Amoxicillin"
        assert records[-1].expiry_date == "01/26"
        assert label_session.basket.list() == ()
        renderer.render.assert_called_once()

    def test_n_entries_make_n_records_regardless_of_quantity(self, orchestrator, ledger, label_session):
        for name in ("A", "B", "C"):
            add_with_expiry(label_session, name)
        label_session.set_print_quantity(4)

        outcome = orchestrator.print(label_session)

        assert len(outcome.records) == 3
        assert outcome.label_count == 12
        assert len({r.print_session_id for r in ledger.load_all()}) == 1
        assert {r.print_quantity for r in outcome.records} == {4}

    def test_renderer_receives_snapshot(self, orchestrator, renderer, label_session, patient):
        add_with_expiry(label_session, "A", "03", "28")
        add_with_expiry(label_session, "B", "04", "29")
        label_session.set_print_quantity(2)

        outcome = orchestrator.print(label_session)

        args = renderer.render.call_args[0]
        assert args[0] == patient
        assert [e.drug_name for e in args[1]] == ["A", "B"]
        assert [e.expiry_date for e in args[1]] == ["03/28", "04/29"]
        assert args[2] == 2
        assert args[3] == outcome.print_session_id

    def test_transitions(self, orchestrator, label_session):
        add_with_expiry(label_session, "A")
        outcome = orchestrator.print(label_session)

        assert outcome.transitions == SUCCESS_PATH
        assert orchestrator.state == PrintState.IDLE

    def test_audit_records_printed_by_operator(self, orchestrator, label_session):
        add_with_expiry(label_session, "A")
        outcome = orchestrator.print(label_session)
        assert outcome.records[0].printed_by == "Sara Ali"
        assert outcome.records[0].patient_name == "Ahmed Hassan"

    def test_outcome_to_dict(self, orchestrator, label_session):
        add_with_expiry(label_session, "A")
        data = orchestrator.print(label_session).to_dict()
        assert data["status"] == "printed"
        assert data["recordCount"] == 1
        assert data["transitions"][0] == "idle"


class TestPreconditions:
    """Checked in order; first failure wins; nothing changes."""

    def test_no_patient(self, orchestrator, renderer, ledger, label_session):
        label_session.set_patient(None)
        label_session.operator = None

        with pytest.raises(NoPatientSelectedError):
            orchestrator.print(label_session)

        renderer.render.assert_not_called()
        assert ledger.load_all() == []

    def test_empty_basket(self, orchestrator, renderer, label_session):
        with pytest.raises(EmptyBasketError):
            orchestrator.print(label_session)
        renderer.render.assert_not_called()

    def test_incomplete_expiry_lists_missing_names(self, orchestrator, renderer, ledger, label_session):
        add_with_expiry(label_session, "A")
        label_session.basket.add("X", "x")
        half = label_session.basket.add("Y", "y")
        expiry.set_month(half, "02")

        with pytest.raises(IncompleteExpiryError) as exc_info:
            orchestrator.print(label_session)

        assert exc_info.value.missing_drug_names == ["X", "Y"]
        assert exc_info.value.details["missing_drug_names"] == ["X", "Y"]
        assert len(label_session.basket) == 3
        assert ledger.load_all() == []
        renderer.render.assert_not_called()

    def test_single_entry_without_expiry_scenario(self, orchestrator, label_session):
        label_session.basket.add("X", "x")

        with pytest.raises(IncompleteExpiryError) as exc_info:
            orchestrator.print(label_session)

        assert exc_info.value.missing_drug_names == ["X"]
        assert [e.drug_name for e in label_session.basket.list()] == ["X"]

    def test_expiry_checked_before_authentication(self, orchestrator, label_session):
        label_session.basket.add("X", "x")
        label_session.operator = None
        with pytest.raises(IncompleteExpiryError):
            orchestrator.print(label_session)

    def test_not_authenticated(self, orchestrator, renderer, label_session):
        add_with_expiry(label_session, "A")
        label_session.operator = None

        with pytest.raises(NotAuthenticatedError):
            orchestrator.print(label_session)

        renderer.render.assert_not_called()
        assert len(label_session.basket) == 1

    def test_blocked_transitions(self, orchestrator, label_session):
        with pytest.raises(EmptyBasketError):
            orchestrator.print(label_session)
        assert orchestrator.transitions == BLOCKED_PATH
        assert orchestrator.state == PrintState.IDLE

    def test_check_has_no_side_effects(self, label_session):
        add_with_expiry(label_session, "A")
        PrintOrchestrator.check(label_session)
        assert len(label_session.basket) == 1


class TestRenderFailure:
    """Render failure leaves basket and audit untouched."""

    def test_render_failure_is_retryable(self, orchestrator, renderer, ledger, label_session):
        add_with_expiry(label_session, "A")
        renderer.render.side_effect = RuntimeError("template missing")

        with pytest.raises(RenderFailureError) as exc_info:
            orchestrator.print(label_session)

        assert "template missing" in exc_info.value.message
        assert len(label_session.basket) == 1
        assert ledger.load_all() == []
        assert orchestrator.state == PrintState.IDLE

        renderer.render.side_effect = None
        outcome = orchestrator.print(label_session)
        assert outcome.status == PrintStatus.PRINTED
        assert len(ledger.load_all()) == 1


class TestAuditFailure:
    """Audit failure after render is a warning; basket still cleared by default."""

    def test_basket_cleared_with_warning(self, renderer, label_session):
        ledger = MagicMock()
        ledger.append_batch.side_effect = AuditAppendFailureError("disk full", "1", 1)
        orchestrator = PrintOrchestrator(renderer, ledger)
        add_with_expiry(label_session, "A")

        outcome = orchestrator.print(label_session)

        assert outcome.status == PrintStatus.PRINTED_WITH_WARNINGS
        assert outcome.records == []
        assert len(outcome.warnings) == 1
        assert "audit" in outcome.warnings[0]
        assert outcome.basket_cleared is True
        assert len(label_session.basket) == 0
        assert outcome.transitions == SUCCESS_PATH

    def test_unexpected_ledger_error_is_also_a_warning(self, renderer, label_session):
        ledger = MagicMock()
        ledger.append_batch.side_effect = RuntimeError("boom")
        orchestrator = PrintOrchestrator(renderer, ledger)
        add_with_expiry(label_session, "A")

        outcome = orchestrator.print(label_session)

        assert outcome.status == PrintStatus.PRINTED_WITH_WARNINGS
        assert len(label_session.basket) == 0

    def test_strict_policy_keeps_basket(self, renderer, label_session):
        ledger = MagicMock()
        ledger.append_batch.side_effect = AuditAppendFailureError("disk full")
        orchestrator = PrintOrchestrator(renderer, ledger, clear_on_audit_failure=False)
        add_with_expiry(label_session, "A")

        outcome = orchestrator.print(label_session)

        assert outcome.basket_cleared is False
        assert len(label_session.basket) == 1


class TestPrintSessionIds:
    """Print session ids never repeat."""

    def test_same_millisecond_ids_are_distinct(self):
        factory = PrintSessionIdFactory(clock=lambda: 1700000000.0)
        first, second = factory(), factory()
        assert first == "1700000000000"
        assert second == "1700000000001"

    def test_consecutive_prints_get_distinct_sessions(self, orchestrator, ledger, label_session):
        add_with_expiry(label_session, "A")
        first = orchestrator.print(label_session)
        add_with_expiry(label_session, "B")
        second = orchestrator.print(label_session)

        assert first.print_session_id != second.print_session_id
        assert len(ledger.load_all()) == 2


class TestConcurrentSessions:
    """One orchestrator shared by several operator sessions."""

    def test_overlapping_prints_keep_their_own_transitions(self, ledger, operator, patient):
        both_rendering = threading.Barrier(2, timeout=5)
        renderer = MagicMock()
        renderer.render.side_effect = lambda *args: both_rendering.wait()
        orchestrator = PrintOrchestrator(renderer, ledger)

        registry = SessionRegistry()
        sessions = [registry.create(operator) for _ in range(2)]
        for i, session in enumerate(sessions):
            session.set_patient(patient)
            add_with_expiry(session, f"Drug {i}")

        outcomes = [None, None]

        def run(index):
            outcomes[index] = orchestrator.print(sessions[index])

        threads = [threading.Thread(target=run, args=(i,)) for i in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert [o.transitions for o in outcomes] == [SUCCESS_PATH, SUCCESS_PATH]
        assert outcomes[0].print_session_id != outcomes[1].print_session_id
        assert ledger.count() == 2
        assert orchestrator.state == PrintState.IDLE
