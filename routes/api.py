"""
API routes.

Handles:
- /health - Health check endpoint
"""

from flask import Blueprint, current_app

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with collaborator status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    # Audit log: writable directory is what matters for printing
    ledger = current_app.config.get("AUDIT_LEDGER")
    if ledger and ledger.path.parent.exists():
        health_status["checks"]["audit_log"] = "ok"
    else:
        health_status["checks"]["audit_log"] = "unavailable"
        health_status["status"] = "degraded"

    # Catalog and patients: empty data means operators can not do anything
    catalog = current_app.config.get("MEDICATION_CATALOG")
    if catalog is not None and len(catalog) > 0:
        health_status["checks"]["catalog"] = f"{len(catalog)} medications"
    else:
        health_status["checks"]["catalog"] = "empty"
        health_status["status"] = "degraded"

    patients = current_app.config.get("PATIENT_DIRECTORY")
    if patients is not None and len(patients) > 0:
        health_status["checks"]["patients"] = f"{len(patients)} patients"
    else:
        health_status["checks"]["patients"] = "empty"
        health_status["status"] = "degraded"

    registry = current_app.config.get("SESSION_REGISTRY")
    health_status["checks"]["active_sessions"] = len(registry) if registry is not None else 0

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
