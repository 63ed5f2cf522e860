"""
Unit tests for the AuditLedger.
"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from core.exceptions import AuditAppendFailureError, AuditClearNotConfirmedError
from models.audit import PrintContext
from models.basket import FrozenBasketEntry
from services.audit_ledger import AuditLedger


# Fixtures

@pytest.fixture
def snapshot():
    return (
        FrozenBasketEntry(id="a", drug_name="Amoxicillin", instruction_text="One capsule", expiry_date="01/26"),
        FrozenBasketEntry(id="b", drug_name="Paracetamol", instruction_text="Two tablets", expiry_date="05/27"),
    )


def make_context(patient, operator, print_session_id="1700000000000", quantity=2):
    return PrintContext.create(
        print_session_id=print_session_id,
        patient=patient,
        operator=operator,
        print_quantity=quantity,
        timestamp=datetime(2026, 1, 12, 9, 30, tzinfo=timezone.utc),
    )


class TestAppendBatch:
    """append_batch creates one record per entry as a single unit."""

    def test_records_share_session_and_timestamp(self, ledger, snapshot, patient, operator):
        records = ledger.append_batch(snapshot, make_context(patient, operator))

        assert len(records) == 2
        assert {r.print_session_id for r in records} == {"1700000000000"}
        assert {r.timestamp for r in records} == {"2026-01-12T09:30:00+00:00"}
        assert [r.id for r in records] == ["1700000000000-0", "1700000000000-1"]

    def test_record_fields(self, ledger, snapshot, patient, operator):
        record = ledger.append_batch(snapshot, make_context(patient, operator))[0]

        assert record.patient_id == "1001"
        assert record.patient_year == "2025"
        assert record.patient_name == "Ahmed Hassan"
        assert record.drug_name == "Amoxicillin"
        assert record.instruction_text == "One capsule"
        assert record.printed_by == "Sara Ali"
        assert record.expiry_date == "01/26"
        assert record.print_quantity == 2
        assert record.status == "printed"

    def test_batches_accumulate_in_order(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator, "1"))
        ledger.append_batch(snapshot[:1], make_context(patient, operator, "2"))

        assert [r.id for r in ledger.load_all()] == ["1-0", "1-1", "2-0"]
        assert ledger.count() == 3

    def test_empty_batch_writes_nothing(self, ledger, patient, operator):
        assert ledger.append_batch([], make_context(patient, operator)) == []
        assert not ledger.path.exists()

    def test_persists_across_instances(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator))
        reopened = AuditLedger(ledger.path)
        assert len(reopened.load_all()) == 2

    def test_unicode_is_kept(self, ledger, patient, operator):
        entry = FrozenBasketEntry(id="a", drug_name="X", instruction_text="قرص واحد يومياً", expiry_date="01/26")
        ledger.append_batch([entry], make_context(patient, operator))
        assert ledger.load_all()[0].instruction_text == "قرص واحد يومياً"

    def test_duplicate_session_id_rejected(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator, "7"))
        with pytest.raises(AuditAppendFailureError):
            ledger.append_batch(snapshot, make_context(patient, operator, "7"))
        assert ledger.count() == 2


class TestAllOrNothing:
    """A failed append leaves load_all() unchanged."""

    def test_failure_during_rename(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator, "1"))
        before = ledger.load_all()

        with patch("services.audit_ledger.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(AuditAppendFailureError) as exc_info:
                ledger.append_batch(snapshot, make_context(patient, operator, "2"))

        assert exc_info.value.record_count == 2
        assert exc_info.value.print_session_id == "2"
        assert ledger.load_all() == before

    def test_failure_mid_serialization(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator, "1"))
        before = ledger.load_all()

        with patch("services.audit_ledger.json.dump", side_effect=TypeError("not serializable")):
            with pytest.raises(AuditAppendFailureError):
                ledger.append_batch(snapshot, make_context(patient, operator, "2"))

        assert ledger.load_all() == before

    def test_no_temp_files_left_behind(self, ledger, snapshot, patient, operator):
        with patch("services.audit_ledger.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(AuditAppendFailureError):
                ledger.append_batch(snapshot, make_context(patient, operator))

        leftovers = [p for p in ledger.path.parent.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []


class TestLoadAll:
    """Corrupt storage degrades to empty."""

    def test_missing_file_is_empty(self, ledger):
        assert ledger.load_all() == []

    @pytest.mark.parametrize("content", ["{not json", '{"a": 1}', '[{"id": "x"}]', "[1, 2]"])
    def test_corrupt_file_is_empty(self, ledger, content):
        ledger.path.parent.mkdir(parents=True, exist_ok=True)
        ledger.path.write_text(content, encoding="utf-8")
        assert ledger.load_all() == []

    def test_append_after_corruption_keeps_old_file(self, ledger, snapshot, patient, operator):
        ledger.path.parent.mkdir(parents=True, exist_ok=True)
        ledger.path.write_text("{broken", encoding="utf-8")

        ledger.append_batch(snapshot, make_context(patient, operator))

        assert ledger.count() == 2
        quarantined = list(ledger.path.parent.glob("log.json.corrupt-*"))
        assert len(quarantined) == 1
        assert quarantined[0].read_text(encoding="utf-8") == "{broken"

    def test_recent(self, ledger, snapshot, patient, operator):
        for session_id in ("1", "2", "3"):
            ledger.append_batch(snapshot, make_context(patient, operator, session_id))

        assert [r.id for r in ledger.recent(2)] == ["3-0", "3-1"]
        assert ledger.recent(0) == []

    def test_file_is_json_list(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator))
        data = json.loads(ledger.path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["drug_name"] == "Amoxicillin"


class TestClearAll:
    """clear_all requires confirmation and is idempotent."""

    def test_requires_confirmation(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator))
        with pytest.raises(AuditClearNotConfirmedError):
            ledger.clear_all()
        with pytest.raises(AuditClearNotConfirmedError):
            ledger.clear_all(confirm="yes")
        assert ledger.count() == 2

    def test_clears(self, ledger, snapshot, patient, operator):
        ledger.append_batch(snapshot, make_context(patient, operator))
        assert ledger.clear_all(confirm=True) == 2
        assert ledger.load_all() == []

    def test_clear_empty_is_noop(self, ledger):
        assert ledger.clear_all(confirm=True) == 0
        assert ledger.clear_all(confirm=True) == 0
        assert ledger.load_all() == []
