"""Shared fixtures for LabelPrintWeb tests."""

import json

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from models.identity import Operator, Patient
from services.audit_ledger import AuditLedger
from services.session_registry import Session, SessionRegistry


OPERATOR_PASSWORD = "Secret123!"


@pytest.fixture
def patient():
    """A resolved patient."""
    return Patient(patient_id="1001", year="2025", name="Ahmed Hassan", national_id="29001011234567")


@pytest.fixture
def operator():
    """An authenticated operator."""
    return Operator(user_id="1", full_name="Sara Ali", username="sara")


@pytest.fixture
def ledger(tmp_path):
    """Audit ledger writing into a temp directory."""
    return AuditLedger(tmp_path / "audit" / "log.json")


@pytest.fixture
def label_session(operator, patient):
    """A logged-in session with a patient selected and an empty basket."""
    registry = SessionRegistry(max_print_quantity=10)
    session = registry.create(operator)
    session.set_patient(patient)
    return session


@pytest.fixture
def data_files(tmp_path):
    """Users, patients and medications files for the app."""
    users = tmp_path / "users.json"
    users.write_text(json.dumps([
        {
            "id": "1",
            "username": "sara",
            "fullName": "Sara Ali",
            "passwordHash": generate_password_hash(OPERATOR_PASSWORD),
        }
    ]), encoding="utf-8")

    patients = tmp_path / "patients.json"
    patients.write_text(json.dumps([
        {"PatientID": "1001", "Year": "2025", "PatientName": "Ahmed Hassan", "NationalID": "290"},
        {"PatientID": "1002", "Year": "2025", "PatientName": "Mona <b>Ibrahim</b>", "NationalID": ""},
    ]), encoding="utf-8")

    medications = tmp_path / "medications.json"
    medications.write_text(json.dumps([
        {"DrugName": "Amoxicillin", "Instruction": "One capsule three times daily", "InternationalCode": "622"},
        {"DrugName": "Paracetamol", "Instruction": "Two tablets every 6 hours"},
        {"DrugName": "Co-amoxiclav 500/125 & Clav", "Instruction": "One tablet twice daily with food"},
    ]), encoding="utf-8")

    return {
        "USERS_FILE": str(users),
        "PATIENTS_FILE": str(patients),
        "MEDICATIONS_FILE": str(medications),
        "AUDIT_LOG_PATH": str(tmp_path / "audit.json"),
    }


@pytest.fixture
def app(data_files):
    """Flask app wired to temp data files."""
    overrides = dict(data_files)
    overrides.update({
        "SECRET_KEY": "test-secret",
        "ENVIRONMENT": "testing",
        "LABEL_SPOOL_DIR": "",
        "LABEL_SIGNATURE": "Dr Test",
        "MAX_PRINT_QUANTITY": 10,
        "CLEAR_BASKET_ON_AUDIT_FAILURE": True,
    })
    return create_app("config.TestingConfig", overrides=overrides)


@pytest.fixture
def client(app):
    """Unauthenticated test client."""
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client logged in as the operator."""
    response = client.post("/auth/login", json={"username": "sara", "password": OPERATOR_PASSWORD})
    assert response.status_code == 200
    return client
