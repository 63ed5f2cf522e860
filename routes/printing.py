"""
Print routes.

POST /print runs one print action through the PrintOrchestrator and answers
with the outcome plus the URL of the rendered label document, which the
operator's browser opens in a separate print window.
"""

from flask import Blueprint, Response, abort, current_app, g, url_for

from logging_config import get_logger
from .common import login_required, t


# Module logger
logger = get_logger(__name__)

print_bp = Blueprint("printing", __name__)


@print_bp.route("/print", methods=["POST"])
@login_required
def print_labels():
    """
    Print every basket entry for the current patient.

    Precondition and render failures are raised and turned into JSON errors
    by the app's error handler; the basket is unchanged in both cases.
    """
    orchestrator = current_app.config["PRINT_ORCHESTRATOR"]
    outcome = orchestrator.print(g.label_session)

    body = outcome.to_dict()
    body["success"] = True
    body["labelsUrl"] = url_for("printing.labels", print_session_id=outcome.print_session_id)
    body["message"] = t("messages.labels_printed")
    if outcome.warnings:
        body["message"] = t("errors.audit_append_failure")
    body["summary"] = g.label_session.summary()
    return body


@print_bp.route("/labels/<print_session_id>", methods=["GET"])
@login_required
def labels(print_session_id):
    """Rendered label document for the print window."""
    html = current_app.config["LABEL_SPOOL"].get(print_session_id)
    if html is None:
        abort(404)
    return Response(html, mimetype="text/html")
