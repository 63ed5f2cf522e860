"""
Audit log routes.

Handles:
- GET  /audit?limit=5   - record count and the most recent records
- POST /audit/clear     - erase the whole log; body must carry {"confirm": true}
"""

from flask import Blueprint, current_app, g, request

from logging_config import get_logger
from .common import login_required, t


# Module logger
logger = get_logger(__name__)

audit_bp = Blueprint("audit", __name__, url_prefix="/audit")

DEFAULT_RECENT = 5
MAX_RECENT = 500


@audit_bp.route("", methods=["GET"])
@login_required
def list_records():
    ledger = current_app.config["AUDIT_LEDGER"]
    limit = request.args.get("limit", default=DEFAULT_RECENT, type=int)
    limit = max(0, min(limit, MAX_RECENT))

    return {
        "count": ledger.count(),
        "records": [r.to_dict() for r in ledger.recent(limit)],
    }


@audit_bp.route("/clear", methods=["POST"])
@login_required
def clear():
    """Erase the audit log after explicit confirmation."""
    data = request.get_json(silent=True) or {}
    ledger = current_app.config["AUDIT_LEDGER"]
    removed = ledger.clear_all(confirm=data.get("confirm") is True)
    logger.warning(f"Audit log cleared by {g.label_session.operator.full_name}")
    return {"success": True, "removed": removed, "message": t("messages.audit_cleared")}
