"""
Login / logout routes.

Login creates a fresh operator Session and stores only its token in the
signed cookie; logout discards the Session with its patient and basket.
"""

from flask import Blueprint, current_app, g, request, session

from logging_config import get_logger
from .common import (
    SESSION_TOKEN_KEY,
    get_registry,
    login_required,
    sanitize_text,
    t,
)


# Module logger
logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    """Check credentials and start a session."""
    data = request.get_json(silent=True) or request.form
    username = sanitize_text(data.get("username"), max_length=100)
    password = data.get("password") or ""

    users = current_app.config["USER_DIRECTORY"]
    result = users.login(username, password)
    if not result.success:
        return result.to_dict(), 401

    registry = get_registry()
    # Logging in again replaces any session this browser already had
    registry.discard(session.get(SESSION_TOKEN_KEY))
    label_session = registry.create(result.user)

    session.clear()
    session[SESSION_TOKEN_KEY] = label_session.token
    session.modified = True

    body = result.to_dict()
    body["message"] = t("messages.welcome", full_name=result.user.full_name)
    return body


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """End the session; basket and patient are dropped."""
    get_registry().discard(session.get(SESSION_TOKEN_KEY))
    language = session.get("language")
    session.clear()
    if language:
        session["language"] = language
    return {"success": True, "message": t("messages.logged_out")}


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    """Current operator and session summary."""
    label_session = g.label_session
    return {
        "success": True,
        "user": label_session.operator.to_dict(),
        "summary": label_session.summary(),
    }
