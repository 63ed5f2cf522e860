"""
Custom exceptions for LabelPrintWeb.

Exception Hierarchy:
    LabelPrintError (base)
    ├── PrintPreconditionError       - Print refused before any side effect
    │   ├── NoPatientSelectedError   - No patient resolved for the session
    │   ├── EmptyBasketError         - Nothing to print
    │   ├── IncompleteExpiryError    - Some entries lack an expiry date
    │   └── NotAuthenticatedError    - No operator identity on the session
    ├── RenderFailureError           - Label rendering raised (retryable)
    ├── AuditAppendFailureError      - Audit batch not written (non-fatal warning)
    ├── StorageCorruptError          - Audit log unreadable (degrades to empty)
    ├── AuditClearNotConfirmedError  - Destructive clear without confirmation
    ├── BasketEntryNotFoundError     - Unknown basket entry id
    ├── InvalidPrintQuantityError    - Quantity outside 1..MAX_PRINT_QUANTITY
    └── CollaboratorDataError        - Users/patients/catalog file unusable

Usage:
    Precondition errors leave every piece of state untouched and carry enough
    detail for the operator to correct the input. None of these errors are
    fatal to the process.
"""

from typing import Optional, Dict, Any, List


class LabelPrintError(Exception):
    """
    Base exception for all LabelPrintWeb errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    code = "label_print_error"
    """Stable identifier used in JSON error responses and translation keys."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# PRINT PRECONDITIONS - checked in order, first failure wins, nothing changes
# =============================================================================

class PrintPreconditionError(LabelPrintError):
    """Base class for failures detected before labels are rendered."""

    code = "print_precondition"


class NoPatientSelectedError(PrintPreconditionError):
    """The session has no resolved patient."""

    code = "no_patient_selected"

    def __init__(self, message: str = "Please search and select a patient first"):
        super().__init__(message, {"resolution": "Search for a patient by ID and year"})


class EmptyBasketError(PrintPreconditionError):
    """The basket holds no entries."""

    code = "empty_basket"

    def __init__(self, message: str = "Basket is empty. Please add medications first"):
        super().__init__(message, {"resolution": "Add at least one medication"})


class IncompleteExpiryError(PrintPreconditionError):
    """
    One or more basket entries have no expiry date.

    The offending drug names are reported in basket order so the operator
    knows exactly which entries to fix.
    """

    code = "incomplete_expiry"

    def __init__(self, missing_drug_names: List[str]):
        message = (
            "Please enter expiry dates for all medications in the basket. "
            f"Missing expiry dates for: {', '.join(missing_drug_names)}"
        )
        details = {
            "missing_drug_names": list(missing_drug_names),
            "resolution": "Select an expiry month and year for each listed medication",
        }
        super().__init__(message, details)
        self.missing_drug_names = list(missing_drug_names)


class NotAuthenticatedError(PrintPreconditionError):
    """No authenticated operator is attached to the session."""

    code = "not_authenticated"

    def __init__(self, message: str = "User not logged in"):
        super().__init__(message, {"resolution": "Log in before printing"})


# =============================================================================
# PRINT RUNTIME ERRORS
# =============================================================================

class RenderFailureError(LabelPrintError):
    """
    The label renderer raised while producing the print document.

    Raised before any audit record is written or the basket is cleared,
    so the print can simply be retried.
    """

    code = "render_failure"

    def __init__(self, cause: str, print_session_id: Optional[str] = None):
        details = {"cause": cause, "resolution": "Retry printing; the basket is unchanged"}
        if print_session_id:
            details["print_session_id"] = print_session_id
        super().__init__(f"Label rendering failed: {cause}", details)
        self.print_session_id = print_session_id


class AuditAppendFailureError(LabelPrintError):
    """
    The audit batch could not be written after labels were rendered.

    Never propagated out of a print run: the orchestrator records it as a
    warning on the outcome because the labels were already produced.
    """

    code = "audit_append_failure"

    def __init__(self, cause: str, print_session_id: Optional[str] = None, record_count: int = 0):
        details = {"cause": cause, "record_count": record_count}
        if print_session_id:
            details["print_session_id"] = print_session_id
        super().__init__(
            f"Print completed, but there was an issue with audit logging: {cause}",
            details,
        )
        self.print_session_id = print_session_id
        self.record_count = record_count


class StorageCorruptError(LabelPrintError):
    """The audit log file could not be parsed."""

    code = "storage_corrupt"

    def __init__(self, path: str, cause: str):
        super().__init__(
            f"Audit log at {path} is unreadable: {cause}",
            {"path": path, "cause": cause},
        )
        self.path = path


class AuditClearNotConfirmedError(LabelPrintError):
    """clear_all() was called without explicit confirmation."""

    code = "audit_clear_not_confirmed"

    def __init__(self):
        super().__init__(
            "Clearing the audit log requires explicit confirmation",
            {"resolution": "Resend the request with confirm=true"},
        )


# =============================================================================
# BASKET / SESSION ERRORS
# =============================================================================

class BasketEntryNotFoundError(LabelPrintError):
    """No basket entry with the given id."""

    code = "basket_entry_not_found"

    def __init__(self, entry_id: str):
        super().__init__(f"No basket entry with id {entry_id}", {"entry_id": entry_id})
        self.entry_id = entry_id


class InvalidPrintQuantityError(LabelPrintError):
    """Requested labels-per-medication is out of range."""

    code = "invalid_print_quantity"

    def __init__(self, quantity: Any, maximum: int):
        super().__init__(
            f"Print quantity must be between 1 and {maximum}, got {quantity!r}",
            {"quantity": quantity, "maximum": maximum},
        )
        self.quantity = quantity
        self.maximum = maximum


class CollaboratorDataError(LabelPrintError):
    """A collaborator data file (users, patients, catalog) is unusable."""

    code = "collaborator_data"

    def __init__(self, source: str, cause: str):
        super().__init__(
            f"Could not load {source}: {cause}",
            {"source": source, "cause": cause},
        )
        self.source = source
