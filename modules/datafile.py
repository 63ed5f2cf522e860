"""
JSON data file loading shared by the file-backed collaborators
(users, patients, medication catalog).
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from core.exceptions import CollaboratorDataError
from logging_config import get_logger

logger = get_logger(__name__)


def load_records(path: Union[str, Path], source: str) -> List[Dict[str, Any]]:
    """
    Load a JSON list of objects.

    A missing file is not an error (empty list, with a warning); a file that
    exists but is not a JSON list of objects is.

    Args:
        path: File to read
        source: Human-readable name used in messages ("patients", ...)

    Returns:
        List of dictionaries

    Raises:
        CollaboratorDataError: If the file is unreadable or malformed
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"{source} file not found: {path}. Using empty {source} list.")
        return []

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CollaboratorDataError(source, f"invalid JSON in {path}: {e}")
    except OSError as e:
        raise CollaboratorDataError(source, f"cannot read {path}: {e}")

    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise CollaboratorDataError(source, f"{path} must contain a JSON list of objects")

    logger.info(f"Loaded {len(data)} {source} from {path}")
    return data


def save_records(path: Union[str, Path], records: List[Dict[str, Any]]) -> None:
    """Write a JSON list of objects, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(records, f, ensure_ascii=False, indent=2)
