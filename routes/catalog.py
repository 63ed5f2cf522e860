"""Medication catalog route."""

from flask import Blueprint, current_app, request

from .common import login_required, sanitize_text

catalog_bp = Blueprint("catalog", __name__)


@catalog_bp.route("/medications", methods=["GET"])
@login_required
def medications():
    """List medications, optionally filtered by ?q= (name or instruction)."""
    catalog = current_app.config["MEDICATION_CATALOG"]
    term = sanitize_text(request.args.get("q"), max_length=100)
    found = catalog.search(term)
    return {
        "medications": [m.to_dict() for m in found],
        "count": len(found),
        "total": len(catalog),
        "query": term,
    }
