"""
Flask route blueprints for LabelPrintWeb.

This module contains all route handlers organized by functionality:
- auth: Login / logout (session lifecycle)
- patients: Patient search
- catalog: Medication list and search
- basket: Basket entries, expiry and print quantity
- printing: Print action and rendered label documents
- audit: Audit log view and clear
- api: Health check

Each blueprint is registered with the Flask app in create_app().
"""

from .auth import auth_bp
from .patients import patients_bp
from .catalog import catalog_bp
from .basket import basket_bp
from .printing import print_bp
from .audit import audit_bp
from .api import api_bp

__all__ = [
    "auth_bp",
    "patients_bp",
    "catalog_bp",
    "basket_bp",
    "print_bp",
    "audit_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(auth_bp)
    app.register_blueprint(patients_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(basket_bp)
    app.register_blueprint(print_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(api_bp)
