"""
Configuration for LabelPrintWeb.

Values come from the environment (optionally via a .env file next to
app.py). Collaborator data lives in JSON files under DATA_DIR.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env early so environment variables are available for the Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "label_print_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Collaborator data files
    DATA_DIR = os.environ.get("DATA_DIR", str(BASE_DIR / "data"))
    USERS_FILE = os.environ.get("USERS_FILE", str(Path(DATA_DIR) / "users.json"))
    PATIENTS_FILE = os.environ.get("PATIENTS_FILE", str(Path(DATA_DIR) / "patients.json"))
    MEDICATIONS_FILE = os.environ.get(
        "MEDICATIONS_FILE", str(Path(DATA_DIR) / "medications.json")
    )

    # Audit log (append-only JSON document, replaced atomically per batch)
    AUDIT_LOG_PATH = os.environ.get(
        "AUDIT_LOG_PATH", str(Path(DATA_DIR) / "medication_audit_log.json")
    )

    # Rendered label documents are kept in memory; set this to also write
    # each document to disk for a print agent to pick up.
    LABEL_SPOOL_DIR = os.environ.get("LABEL_SPOOL_DIR", "")

    # ==========================================================================
    # Label content
    # ==========================================================================
    # Empty means labels carry no logo
    LABEL_LOGO_URL = os.environ.get("LABEL_LOGO_URL", "")
    LABEL_SIGNATURE = os.environ.get("LABEL_SIGNATURE", "Dr Mahmoud")
    DEFAULT_INSTRUCTION = os.environ.get("DEFAULT_INSTRUCTION", "Take as directed")

    # Labels per medication in one print run
    MAX_PRINT_QUANTITY = int(os.environ.get("MAX_PRINT_QUANTITY", "10"))

    # Operator-typed instruction override
    MAX_INSTRUCTION_LENGTH = int(os.environ.get("MAX_INSTRUCTION_LENGTH", "500"))

    # When False, a failed audit append keeps the basket instead of clearing it
    CLEAR_BASKET_ON_AUDIT_FAILURE = (
        os.environ.get("CLEAR_BASKET_ON_AUDIT_FAILURE", "1") == "1"
    )


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 8 * 3600  # one shift


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
