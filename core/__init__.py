"""
Core module for LabelPrintWeb.

Contains fundamental components with no Flask dependency:
- exceptions: Custom exception hierarchy
- expiry: Expiry month/year handling and label display format
"""

from .exceptions import (
    LabelPrintError,
    PrintPreconditionError,
    NoPatientSelectedError,
    EmptyBasketError,
    IncompleteExpiryError,
    NotAuthenticatedError,
    RenderFailureError,
    AuditAppendFailureError,
    StorageCorruptError,
    AuditClearNotConfirmedError,
    BasketEntryNotFoundError,
    InvalidPrintQuantityError,
    CollaboratorDataError,
)
from . import expiry

__all__ = [
    "LabelPrintError",
    "PrintPreconditionError",
    "NoPatientSelectedError",
    "EmptyBasketError",
    "IncompleteExpiryError",
    "NotAuthenticatedError",
    "RenderFailureError",
    "AuditAppendFailureError",
    "StorageCorruptError",
    "AuditClearNotConfirmedError",
    "BasketEntryNotFoundError",
    "InvalidPrintQuantityError",
    "CollaboratorDataError",
    "expiry",
]
