"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Strips leading/trailing whitespace
    - Removes BOM characters (\\ufeff)
    - Replaces multiple spaces / non-breaking spaces with single underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "")
    name = name.strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_code_list(raw: str | None) -> list[str]:
    """Parse lists like '600001, 600002' or 'tok1;tok2' preserving order.

    Handles comma, semicolon and whitespace separators; drops duplicates.
    """
    if not raw:
        return []
    parts = re.split(r"[,;\s]+", raw.strip())
    seen: dict[str, None] = {}
    for p in parts:
        if p.strip():
            seen.setdefault(p.strip(), None)
    return list(seen)


def parse_polygon(raw: str | None) -> list | None:
    """Parse a JSON ring like '[[13.2, 80.1], [13.2, 80.3], ...]'.

    Vertex validation is left to the domain; only unreadable JSON is dropped.
    """
    raw = clean_string(raw)
    if raw is None:
        return None
    try:
        ring = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable polygon: %.60s", raw)
        return None
    return ring if isinstance(ring, list) else None
