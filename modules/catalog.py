"""
Medication catalog.

Reads the pharmacy's medication export (DrugName, Instruction,
InternationalCode) and offers name/instruction search.
"""

from pathlib import Path
from typing import List, Optional, Union

from models.medication import Medication
from .datafile import load_records
from logging_config import get_logger

logger = get_logger(__name__)


class MedicationCatalog:
    """File-backed list of medications with default instructions."""

    def __init__(self, medications_file: Union[str, Path]):
        self.medications_file = Path(medications_file)
        self._medications: List[Medication] = []
        self.reload()

    def reload(self) -> None:
        medications = []
        for row in load_records(self.medications_file, "medications"):
            medication = Medication.from_dict(row)
            if not medication.drug_name:
                logger.warning(f"Skipping catalog row without DrugName: {row}")
                continue
            medications.append(medication)
        self._medications = medications

    def list_medications(self) -> List[Medication]:
        return list(self._medications)

    def search(self, term: Optional[str]) -> List[Medication]:
        """
        Case-insensitive substring search on drug name and instruction.

        A blank term returns the whole catalog.
        """
        if not term or not term.strip():
            return self.list_medications()
        return [m for m in self._medications if m.matches(term)]

    def find(self, drug_name: str) -> Optional[Medication]:
        """Exact (case-insensitive) drug name lookup."""
        wanted = (drug_name or "").strip().lower()
        for medication in self._medications:
            if medication.drug_name.lower() == wanted:
                return medication
        return None

    def __len__(self) -> int:
        return len(self._medications)
