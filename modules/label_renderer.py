"""
Label rendering.

Turns a patient and a basket snapshot into one printable HTML document with
one 4cm x 2.5cm label per medication per copy. The document is placed in a
LabelSpool for the print window (GET /labels/<id>) and, when a spool
directory is configured, also written to disk for a print agent.

Rendering is fire-and-forget from the orchestrator's point of view: success
means the document was produced and spooled, not that paper came out.
"""

import threading
import uuid
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.expiry import display_expiry
from models.basket import FrozenBasketEntry
from models.identity import Patient
from logging_config import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
LABEL_TEMPLATE = "labels.html"


class LabelSpool:
    """
    Bounded, thread-safe store of rendered label documents.

    Keeps the most recent `capacity` documents; older ones are dropped.
    """

    def __init__(self, capacity: int = 50):
        self._documents: "OrderedDict[str, str]" = OrderedDict()
        self._capacity = capacity
        self._lock = threading.Lock()

    def put(self, print_session_id: str, html: str) -> None:
        with self._lock:
            self._documents[print_session_id] = html
            self._documents.move_to_end(print_session_id)
            while len(self._documents) > self._capacity:
                dropped, _ = self._documents.popitem(last=False)
                logger.debug(f"Dropped spooled labels {dropped}")

    def get(self, print_session_id: str) -> Optional[str]:
        with self._lock:
            return self._documents.get(print_session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)


class HtmlLabelRenderer:
    """
    Renders label documents from templates/labels.html.

    Args:
        spool: Where rendered documents are kept
        logo_url: Image shown in each label header
        signature: Name printed after "By:"
        spool_dir: Optional directory to also write <print_session_id>.html
        clock: Returns the print date (injectable for tests)
    """

    def __init__(
        self,
        spool: LabelSpool,
        logo_url: str = "",
        signature: str = "",
        spool_dir: Union[str, Path, None] = None,
        templates_dir: Union[str, Path] = TEMPLATES_DIR,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.spool = spool
        self.logo_url = logo_url
        self.signature = signature
        self.spool_dir = Path(spool_dir) if spool_dir else None
        self._clock = clock
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def build_labels(
        self,
        patient: Patient,
        entries: Sequence[FrozenBasketEntry],
        print_quantity: int,
    ) -> List[Dict[str, str]]:
        """One label dict per entry per copy, in basket order."""
        print_date = self._clock().strftime("%d/%m/%Y")
        labels = []
        for entry in entries:
            label = {
                "patient_full_id": patient.full_id,
                "patient_name": patient.name,
                "drug_name": entry.drug_name,
                "instruction_text": entry.instruction_text,
                "expiry": display_expiry(entry.expiry_date),
                "signature": self.signature,
                "print_date": print_date,
            }
            labels.extend(dict(label) for _ in range(print_quantity))
        return labels

    def render_html(
        self,
        patient: Patient,
        entries: Sequence[FrozenBasketEntry],
        print_quantity: int,
    ) -> str:
        template = self._env.get_template(LABEL_TEMPLATE)
        return template.render(
            labels=self.build_labels(patient, entries, print_quantity),
            logo_url=self.logo_url,
        )

    def render(
        self,
        patient: Patient,
        entries: Sequence[FrozenBasketEntry],
        print_quantity: int,
        print_session_id: Optional[str] = None,
    ) -> None:
        """Render and spool the label document for one print action."""
        print_session_id = print_session_id or uuid.uuid4().hex
        html = self.render_html(patient, entries, print_quantity)

        if self.spool_dir is not None:
            self.spool_dir.mkdir(parents=True, exist_ok=True)
            (self.spool_dir / f"{print_session_id}.html").write_text(html, encoding="utf-8")

        self.spool.put(print_session_id, html)
        logger.debug(f"Spooled labels {print_session_id} ({len(html)} bytes)")
