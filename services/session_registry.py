"""
Operator sessions.

A Session is created on login and discarded on logout; it owns the resolved
patient, the basket and the print quantity. Nothing in it outlives logout.

Each Flask request finds its Session through a random token stored in the
signed session cookie. The registry map is lock protected because Flask may
serve requests on several threads; a Session itself is used by one operator
terminal at a time and is not locked.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from core.exceptions import InvalidPrintQuantityError
from models.identity import Operator, Patient
from services.basket_store import BasketStore, DEFAULT_INSTRUCTION
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

DEFAULT_MAX_PRINT_QUANTITY = 10


@dataclass
class Session:
    """State of one logged-in operator."""

    token: str
    operator: Optional[Operator]
    patient: Optional[Patient] = None
    basket: BasketStore = field(default_factory=BasketStore)
    print_quantity: int = 1
    max_print_quantity: int = DEFAULT_MAX_PRINT_QUANTITY

    def set_patient(self, patient: Optional[Patient]) -> None:
        self.patient = patient

    def set_print_quantity(self, quantity) -> int:
        """
        Set labels per medication.

        Raises:
            InvalidPrintQuantityError: If not an integer in 1..max_print_quantity
        """
        if isinstance(quantity, bool):
            raise InvalidPrintQuantityError(quantity, self.max_print_quantity)
        if isinstance(quantity, float):
            if not quantity.is_integer():
                raise InvalidPrintQuantityError(quantity, self.max_print_quantity)
            quantity = int(quantity)
        try:
            value = int(quantity)
        except (TypeError, ValueError):
            raise InvalidPrintQuantityError(quantity, self.max_print_quantity)
        if not 1 <= value <= self.max_print_quantity:
            raise InvalidPrintQuantityError(quantity, self.max_print_quantity)
        self.print_quantity = value
        return value

    @property
    def total_labels(self) -> int:
        return len(self.basket) * self.print_quantity

    def summary(self) -> Dict[str, object]:
        """Print summary shown next to the basket."""
        entries = self.basket.list()
        return {
            "patient": self.patient.to_dict() if self.patient else None,
            "medications": len(entries),
            "printQuantity": self.print_quantity,
            "totalLabels": self.total_labels,
            "expirySet": sum(1 for e in entries if e.has_expiry),
            "missingExpiry": self.basket.missing_expiry(),
        }


class SessionRegistry:
    """
    Live sessions keyed by token.

    Usage:
        registry = SessionRegistry(max_print_quantity=10)
        session = registry.create(operator)
        same = registry.get(session.token)
        registry.discard(session.token)
    """

    def __init__(
        self,
        max_print_quantity: int = DEFAULT_MAX_PRINT_QUANTITY,
        default_instruction: str = DEFAULT_INSTRUCTION,
    ):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._max_print_quantity = max_print_quantity
        self._default_instruction = default_instruction

    def create(self, operator: Operator) -> Session:
        """Start a fresh session for an authenticated operator."""
        session = Session(
            token=uuid.uuid4().hex,
            operator=operator,
            basket=BasketStore(self._default_instruction),
            max_print_quantity=self._max_print_quantity,
        )
        with self._lock:
            self._sessions[session.token] = session
        logger.info(f"Session started for {operator.full_name}")
        return session

    def get(self, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def discard(self, token: Optional[str]) -> bool:
        """
        Drop a session with its patient and basket.

        Returns:
            True if a session was removed
        """
        if not token:
            return False
        with self._lock:
            session = self._sessions.pop(token, None)
        if session:
            name = session.operator.full_name if session.operator else "unknown"
            logger.info(
                f"Session ended for {name} "
                f"({len(session.basket)} unprinted basket entries dropped)"
            )
        return session is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
