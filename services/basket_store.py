"""
Basket store: the ordered medications waiting to be labelled for one session.

Insertion order is the label order. The store is owned by exactly one
Session and is not serialized internally: a session belongs to a single
operator terminal, and every call is a discrete user action.

Usage:
    basket = BasketStore()
    entry = basket.add("Amoxicillin 500mg", "One capsule three times daily")
    expiry.set_month(basket.get(entry.id), "01")
    basket.remove(entry.id)
    basket.clear()
"""

from __future__ import annotations

import itertools
import time
from typing import List, Optional, Tuple

from core.exceptions import BasketEntryNotFoundError
from models.basket import BasketEntry
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

DEFAULT_INSTRUCTION = "Take as directed"


class BasketStore:
    """
    Ordered collection of BasketEntry objects.

    All mutation goes through add/remove/clear; list() hands out a tuple so
    callers can not reorder or drop entries behind the store's back.
    """

    def __init__(self, default_instruction: str = DEFAULT_INSTRUCTION):
        self._entries: List[BasketEntry] = []
        self._sequence = itertools.count(1)
        self._default_instruction = default_instruction

    def _next_id(self) -> str:
        # Millisecond timestamp alone collides on fast double clicks
        return f"{int(time.time() * 1000)}-{next(self._sequence)}"

    def add(self, drug_name: str, instruction_text: Optional[str] = None) -> BasketEntry:
        """
        Append a medication to the end of the basket.

        Args:
            drug_name: Medication name, must be non-empty
            instruction_text: Dosing instruction; blank falls back to the default

        Returns:
            The new entry (expiry unset)

        Raises:
            ValueError: If drug_name is empty
        """
        drug_name = (drug_name or "").strip()
        if not drug_name:
            raise ValueError("drug_name is required")

        entry = BasketEntry(
            id=self._next_id(),
            drug_name=drug_name,
            instruction_text=(instruction_text or "").strip() or self._default_instruction,
        )
        self._entries.append(entry)
        logger.debug(f"Added {entry.drug_name} to basket as {entry.id}")
        return entry

    def remove(self, entry_id: str) -> bool:
        """
        Remove the entry with the given id.

        Returns:
            True if an entry was removed, False if the id was unknown
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                logger.debug(f"Removed {entry.drug_name} ({entry_id}) from basket")
                return True
        return False

    def clear(self) -> int:
        """
        Empty the basket.

        Returns:
            Number of entries removed
        """
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Cleared {count} entries from basket")
        return count

    def get(self, entry_id: str) -> BasketEntry:
        """
        Look up a live entry (e.g. to set its expiry).

        Raises:
            BasketEntryNotFoundError: If no entry has this id
        """
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise BasketEntryNotFoundError(entry_id)

    def list(self) -> Tuple[BasketEntry, ...]:
        """Entries in insertion order."""
        return tuple(self._entries)

    def missing_expiry(self) -> List[str]:
        """Drug names of entries without an expiry date, in basket order."""
        return [e.drug_name for e in self._entries if not e.has_expiry]

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
