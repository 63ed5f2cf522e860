"""
LabelPrintWeb - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and sets up logging
2. Loads the collaborators (users, patients, medication catalog)
3. Creates the audit ledger, label renderer and print orchestrator
4. Registers route blueprints, error handlers and CLI commands

ARCHITECTURE:
    Request
    └── operator Session (looked up by token from the signed cookie)
        ├── patient          (set by /patients/search)
        ├── BasketStore      (/basket)
        └── print_quantity   (/basket/quantity)

    POST /print
    └── PrintOrchestrator: validate -> render -> audit -> clear basket

Sessions live in memory only; logging out or restarting drops them.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from dotenv import load_dotenv
from flask import Flask, request, session
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import LabelPrintError
from modules.auth import UserDirectory
from modules.catalog import MedicationCatalog
from modules.i18n import get_supported_languages, translate
from modules.label_renderer import HtmlLabelRenderer, LabelSpool
from modules.patients import PatientDirectory
from services.audit_ledger import AuditLedger
from services.print_orchestrator import PrintOrchestrator
from services.session_registry import SessionRegistry
from routes import register_blueprints
from routes.common import error_response


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In a frozen bundle: the directory containing the executable
    In development: the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(__file__).parent


def create_app(
    config_object: str = "config.Config",
    overrides: Optional[Dict[str, Any]] = None,
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the config class
        overrides: Extra config values applied last (tests use tmp paths)

    Returns:
        Configured Flask application

    Raises:
        CollaboratorDataError: If a users/patients/catalog file is malformed
    """
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting LabelPrintWeb in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # COLLABORATORS (FAIL-FAST on malformed data files)
    # =========================================================================

    app.config["USER_DIRECTORY"] = UserDirectory(app.config["USERS_FILE"])
    app.config["PATIENT_DIRECTORY"] = PatientDirectory(app.config["PATIENTS_FILE"])
    app.config["MEDICATION_CATALOG"] = MedicationCatalog(app.config["MEDICATIONS_FILE"])

    # =========================================================================
    # SERVICES
    # =========================================================================

    app.config["SESSION_REGISTRY"] = SessionRegistry(
        max_print_quantity=app.config["MAX_PRINT_QUANTITY"],
        default_instruction=app.config["DEFAULT_INSTRUCTION"],
    )

    ledger = AuditLedger(app.config["AUDIT_LOG_PATH"])
    app.config["AUDIT_LEDGER"] = ledger

    spool = LabelSpool()
    app.config["LABEL_SPOOL"] = spool
    renderer = HtmlLabelRenderer(
        spool=spool,
        logo_url=app.config["LABEL_LOGO_URL"],
        signature=app.config["LABEL_SIGNATURE"],
        spool_dir=app.config.get("LABEL_SPOOL_DIR") or None,
    )
    app.config["LABEL_RENDERER"] = renderer

    app.config["PRINT_ORCHESTRATOR"] = PrintOrchestrator(
        renderer,
        ledger,
        clear_on_audit_failure=app.config["CLEAR_BASKET_ON_AUDIT_FAILURE"],
    )
    if not app.config["CLEAR_BASKET_ON_AUDIT_FAILURE"]:
        logger.warning("Strict audit policy: basket is kept when the audit append fails")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(LabelPrintError)
    def handle_label_print_error(e):
        return error_response(e)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return {"success": False, "error": e.name.lower().replace(" ", "_"), "message": e.description}, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"success": False, "error": "server_error", "message": "An unexpected error occurred. Please try again."}, 500

    # =========================================================================
    # LANGUAGE ROUTE
    # =========================================================================

    @app.route("/set_language/<lang>", methods=["POST", "GET"])
    def set_language(lang: str):
        languages = get_supported_languages()
        if lang not in languages:
            return {"success": False, "error": "unsupported_language", "message": f"Unsupported language: {lang}"}, 400
        session["language"] = lang
        session.modified = True
        return {
            "success": True,
            "language": lang,
            "direction": languages[lang]["direction"],
            "message": translate("messages.language_changed", lang=lang, name=languages[lang]["name"]),
        }

    # =========================================================================
    # CLI COMMANDS
    # =========================================================================

    @app.cli.command("create-user")
    @click.argument("username")
    @click.option("--full-name", prompt=True, help="Name recorded as printed_by")
    @click.password_option()
    def create_user(username, full_name, password):
        """Add an operator account to the users file."""
        try:
            operator = app.config["USER_DIRECTORY"].add_user(username, password, full_name)
        except ValueError as e:
            raise click.ClickException(str(e))
        click.echo(f"Created user {operator.username} ({operator.full_name})")

    @app.after_request
    def log_request(response):
        logger.debug(f"{request.method} {request.path} -> {response.status_code}")
        return response

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
