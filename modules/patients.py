"""
Patient record lookup.

Patients are identified by (PatientID, Year). The patients file uses the
hospital export's column names:

    [{"PatientID": "1234", "Year": "2025", "PatientName": "...", "NationalID": "..."}]
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from models.identity import Patient
from .datafile import load_records
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PatientLookup:
    """Outcome of a patient search."""

    success: bool
    patient: Optional[Patient] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "patient": self.patient.to_dict(),
                "fullId": self.patient.full_id,
            }
        return {"success": False, "message": self.message}


class PatientDirectory:
    """File-backed patient records keyed by (id, year)."""

    def __init__(self, patients_file: Union[str, Path]):
        self.patients_file = Path(patients_file)
        self._index: Dict[tuple, Patient] = {}
        self.reload()

    def reload(self) -> None:
        self._index = {}
        for row in load_records(self.patients_file, "patients"):
            patient = Patient(
                patient_id=str(row.get("PatientID", "")).strip(),
                year=str(row.get("Year", "")).strip(),
                name=row.get("PatientName", ""),
                national_id=str(row.get("NationalID", "") or ""),
            )
            self._index[(patient.patient_id, patient.year)] = patient

    def search(self, patient_id: str, year: str) -> PatientLookup:
        """Find a patient by id and registration year."""
        patient_id = (patient_id or "").strip()
        year = (year or "").strip()
        if not patient_id or not year:
            return PatientLookup(False, message="Please enter both Patient ID and Year")

        patient = self._index.get((patient_id, year))
        if patient is None:
            logger.info(f"Patient {patient_id}/{year} not found")
            return PatientLookup(False, message=f"No patient with ID {patient_id} in {year}")
        return PatientLookup(True, patient=patient)

    def __len__(self) -> int:
        return len(self._index)
