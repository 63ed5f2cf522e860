"""
Helpers shared by the route blueprints: session lookup, input sanitizing,
language selection and JSON error responses.
"""

import html
from functools import wraps

import bleach
from flask import current_app, g, session

from core.exceptions import (
    AuditClearNotConfirmedError,
    BasketEntryNotFoundError,
    InvalidPrintQuantityError,
    LabelPrintError,
    NotAuthenticatedError,
    PrintPreconditionError,
    RenderFailureError,
)
from modules.i18n import DEFAULT_LANGUAGE, translate, translate_error
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

SESSION_TOKEN_KEY = "session_token"


def sanitize_text(text, max_length: int = None) -> str:
    """Strip markup from operator input and cap its length."""
    if not text:
        return ""
    text = str(text).strip()
    # bleach entity-escapes what it keeps; templates escape again on output
    text = html.unescape(bleach.clean(text, tags=[], strip=True))
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def current_language() -> str:
    return session.get("language", DEFAULT_LANGUAGE)


def t(key: str, **kwargs) -> str:
    """Translate a message key into the request's language."""
    return translate(key, lang=current_language(), **kwargs)


def get_registry():
    return current_app.config["SESSION_REGISTRY"]


def current_session():
    """The operator Session for this request, or None."""
    return get_registry().get(session.get(SESSION_TOKEN_KEY))


def login_required(view):
    """Resolve the operator Session into g.label_session or answer 401."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        label_session = current_session()
        if label_session is None:
            raise NotAuthenticatedError()
        g.label_session = label_session
        return view(*args, **kwargs)

    return wrapped


def status_for(error: LabelPrintError) -> int:
    """HTTP status for an application error."""
    if isinstance(error, NotAuthenticatedError):
        return 401
    if isinstance(error, PrintPreconditionError):
        return 409
    if isinstance(error, RenderFailureError):
        return 502
    if isinstance(error, BasketEntryNotFoundError):
        return 404
    if isinstance(error, (AuditClearNotConfirmedError, InvalidPrintQuantityError)):
        return 400
    return 500


def error_response(error: LabelPrintError):
    """JSON body and status for an application error."""
    status = status_for(error)
    if status >= 500:
        logger.error(f"{error.code}: {error}")
    else:
        logger.info(f"{error.code}: {error.message}")

    return {
        "success": False,
        "error": error.code,
        "message": translate_error(error, current_language()),
        "details": error.details,
    }, status
