"""
Basket routes.

Handles:
- GET    /basket                - entries, print summary, expiry choices
- POST   /basket                - add a medication for the current patient
- DELETE /basket                - clear the basket
- DELETE /basket/<id>           - remove one entry
- PATCH  /basket/<id>/expiry    - set expiry month and/or year
- PUT    /basket/quantity       - labels per medication
"""

from flask import Blueprint, current_app, g, request

from core import expiry
from core.exceptions import NoPatientSelectedError
from logging_config import get_logger
from .common import login_required, sanitize_text, t


# Module logger
logger = get_logger(__name__)

basket_bp = Blueprint("basket", __name__, url_prefix="/basket")

VALID_MONTHS = {choice["value"] for choice in expiry.MONTH_CHOICES}
VALID_YEARS = {choice["value"] for choice in expiry.YEAR_CHOICES}


def _basket_payload(label_session):
    return {
        "basket": [entry.to_dict() for entry in label_session.basket.list()],
        "summary": label_session.summary(),
    }


@basket_bp.route("", methods=["GET"])
@login_required
def get_basket():
    body = _basket_payload(g.label_session)
    body["expiryChoices"] = {
        "months": expiry.MONTH_CHOICES,
        "years": expiry.YEAR_CHOICES,
    }
    return body


@basket_bp.route("", methods=["POST"])
@login_required
def add_to_basket():
    """
    Add a medication.

    The catalog instruction is used unless the body carries a non-blank
    instructionText override.
    """
    label_session = g.label_session
    if label_session.patient is None:
        raise NoPatientSelectedError()

    data = request.get_json(silent=True) or {}
    drug_name = sanitize_text(data.get("drugName"), max_length=200)
    if not drug_name:
        return {"success": False, "error": "missing_drug_name", "message": "drugName is required"}, 400

    override = sanitize_text(
        data.get("instructionText"),
        max_length=current_app.config.get("MAX_INSTRUCTION_LENGTH", 500),
    )
    if override:
        instruction = override
    else:
        medication = current_app.config["MEDICATION_CATALOG"].find(drug_name)
        instruction = medication.default_instruction if medication else ""

    entry = label_session.basket.add(drug_name, instruction)
    logger.info(f"Basket +{entry.drug_name} for patient {label_session.patient.full_id}")

    body = _basket_payload(label_session)
    body.update({
        "success": True,
        "entry": entry.to_dict(),
        "message": t("messages.added_to_basket", drug_name=entry.drug_name),
    })
    return body, 201


@basket_bp.route("", methods=["DELETE"])
@login_required
def clear_basket():
    g.label_session.basket.clear()
    body = _basket_payload(g.label_session)
    body.update({"success": True, "message": t("messages.basket_cleared")})
    return body


@basket_bp.route("/<entry_id>", methods=["DELETE"])
@login_required
def remove_from_basket(entry_id):
    """Remove one entry; unknown ids are not an error."""
    removed = g.label_session.basket.remove(entry_id)
    body = _basket_payload(g.label_session)
    body.update({
        "success": True,
        "removed": removed,
        "message": t("messages.removed_from_basket"),
    })
    return body


@basket_bp.route("/<entry_id>/expiry", methods=["PATCH"])
@login_required
def set_expiry(entry_id):
    """
    Set expiry month and/or year.

    Only keys present in the body are changed; an empty string un-sets.
    """
    data = request.get_json(silent=True) or {}
    entry = g.label_session.basket.get(entry_id)

    if "month" in data:
        month = str(data.get("month") or "")
        if month and month not in VALID_MONTHS:
            return {"success": False, "error": "invalid_month", "message": f"Invalid month: {month}"}, 400
        expiry.set_month(entry, month)

    if "year" in data:
        year = str(data.get("year") or "")
        if year and year not in VALID_YEARS:
            return {"success": False, "error": "invalid_year", "message": f"Invalid year: {year}"}, 400
        expiry.set_year(entry, year)

    return {"success": True, "entry": entry.to_dict(), "summary": g.label_session.summary()}


@basket_bp.route("/quantity", methods=["PUT"])
@login_required
def set_quantity():
    data = request.get_json(silent=True) or {}
    quantity = g.label_session.set_print_quantity(data.get("quantity"))
    return {"success": True, "printQuantity": quantity, "summary": g.label_session.summary()}
