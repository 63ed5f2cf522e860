"""
Patient search route.

A successful search attaches the patient to the operator's session; a
failed one detaches any previous patient so labels can not be printed for
the wrong person.
"""

from flask import Blueprint, current_app, g, request

from logging_config import get_logger
from .common import login_required, sanitize_text


# Module logger
logger = get_logger(__name__)

patients_bp = Blueprint("patients", __name__, url_prefix="/patients")


@patients_bp.route("/search", methods=["GET"])
@login_required
def search():
    """Look up a patient by ?patientId=&year=."""
    patient_id = sanitize_text(request.args.get("patientId"), max_length=32)
    year = sanitize_text(request.args.get("year"), max_length=4)

    directory = current_app.config["PATIENT_DIRECTORY"]
    result = directory.search(patient_id, year)

    if result.success:
        g.label_session.set_patient(result.patient)
        logger.info(f"Patient {result.patient.full_id} selected")
        return result.to_dict()

    g.label_session.set_patient(None)
    status = 400 if not patient_id or not year else 404
    return result.to_dict(), status
