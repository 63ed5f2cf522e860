"""
Audit ledger: durable, append-only log of printed labels.

The log is a single JSON document (a list of records). Each print action
appends one batch by writing the complete new document to a temporary file
in the same directory and renaming it over the old one, so a reader sees
either the old log or the old log plus the whole batch, never part of it.

Durability is best effort: an unreadable log is reported and treated as
empty rather than stopping the pharmacy from printing.

Thread Safety:
    - One threading.Lock serializes every read-modify-write of the file
    - Records are frozen dataclasses, safe to hand out
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Union

from core.exceptions import (
    AuditAppendFailureError,
    AuditClearNotConfirmedError,
    StorageCorruptError,
)
from models.audit import AuditRecord, AuditStatus, PrintContext
from models.basket import FrozenBasketEntry
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class AuditLedger:
    """
    File-backed audit log.

    Usage:
        ledger = AuditLedger("data/medication_audit_log.json")
        records = ledger.append_batch(snapshot, context)
        everything = ledger.load_all()
        ledger.clear_all(confirm=True)
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = threading.Lock()
        logger.info(f"AuditLedger using {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _read_strict(self) -> List[AuditRecord]:
        """
        Parse the log file.

        Raises:
            StorageCorruptError: If the file exists but can not be parsed
        """
        if not self._path.exists():
            return []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(f"expected a list of records, got {type(raw).__name__}")
            return [AuditRecord.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageCorruptError(str(self._path), str(e)) from e

    def load_all(self) -> List[AuditRecord]:
        """
        Every record in append order.

        A corrupt or unreadable log is logged and reported as empty.
        """
        with self._lock:
            try:
                return self._read_strict()
            except StorageCorruptError as e:
                logger.warning(f"{e.message}; treating audit log as empty")
                return []

    def recent(self, limit: int = 5) -> List[AuditRecord]:
        """The last `limit` records, oldest first."""
        if limit <= 0:
            return []
        return self.load_all()[-limit:]

    def count(self) -> int:
        return len(self.load_all())

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def _write_atomic(self, records: List[AuditRecord]) -> None:
        """Replace the log with `records` in one rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _quarantine(self, error: StorageCorruptError) -> None:
        """Move a corrupt log aside so a new batch does not overwrite it."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        os.replace(self._path, target)
        logger.warning(f"{error.message}; moved to {target}, starting a new log")

    @staticmethod
    def build_records(
        entries: Iterable[FrozenBasketEntry],
        context: PrintContext,
    ) -> List[AuditRecord]:
        """One record per entry, all sharing the context's session id and time."""
        timestamp = context.timestamp.isoformat()
        return [
            AuditRecord(
                id=f"{context.print_session_id}-{index}",
                timestamp=timestamp,
                print_session_id=context.print_session_id,
                patient_id=context.patient.patient_id,
                patient_year=context.patient.year,
                patient_name=context.patient.name,
                drug_name=entry.drug_name,
                instruction_text=entry.instruction_text,
                printed_by=context.operator.full_name,
                expiry_date=entry.expiry_date,
                print_quantity=context.print_quantity,
                status=AuditStatus.PRINTED.value,
            )
            for index, entry in enumerate(entries)
        ]

    def append_batch(
        self,
        entries: Iterable[FrozenBasketEntry],
        context: PrintContext,
    ) -> List[AuditRecord]:
        """
        Append one record per basket entry as a single unit.

        Args:
            entries: Print-time snapshot of the basket
            context: Patient, operator, quantity, session id and timestamp

        Returns:
            The records appended

        Raises:
            AuditAppendFailureError: If the batch could not be written; the
                log on disk is unchanged in that case
        """
        records = self.build_records(entries, context)
        if not records:
            return []

        with self._lock:
            try:
                try:
                    existing = self._read_strict()
                except StorageCorruptError as e:
                    self._quarantine(e)
                    existing = []

                taken = {r.id for r in existing}
                duplicates = [r.id for r in records if r.id in taken]
                if duplicates:
                    raise ValueError(f"record ids already in ledger: {duplicates}")

                self._write_atomic(existing + records)
            except (OSError, ValueError, TypeError) as e:
                logger.error(
                    f"Audit append failed for print session {context.print_session_id}: {e}",
                    exc_info=True,
                )
                raise AuditAppendFailureError(
                    str(e), context.print_session_id, len(records)
                ) from e

        logger.info(
            f"Appended {len(records)} audit records for print session "
            f"{context.print_session_id}"
        )
        return records

    def clear_all(self, confirm: bool = False) -> int:
        """
        Erase the entire log.

        Destructive and irreversible, so the caller must pass confirm=True.
        Clearing an empty or missing log is a no-op.

        Returns:
            Number of records removed (0 if the log was unreadable)

        Raises:
            AuditClearNotConfirmedError: If confirm is not True
        """
        if confirm is not True:
            raise AuditClearNotConfirmedError()

        with self._lock:
            if not self._path.exists():
                return 0
            try:
                count = len(self._read_strict())
            except StorageCorruptError:
                count = 0
            self._path.unlink()

        logger.warning(f"Audit log cleared ({count} records removed)")
        return count
