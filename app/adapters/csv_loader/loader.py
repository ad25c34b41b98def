"""CSV loader — reads and normalizes authority data files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from app.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_code_list,
    parse_polygon,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> csv.Dialect:
    """Try to detect delimiter (comma/semicolon/tab) to support spreadsheet exports."""
    if not sample:
        return csv.get_dialect("excel")

    first_line = sample.splitlines()[0] if sample else ""
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect

    try:
        return csv.Sniffer().sniff(sample, delimiters=[",", ";", "\t"])
    except csv.Error:
        return csv.get_dialect("excel")


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        dialect = _sniff_dialect(sample)
        reader = csv.DictReader(f, dialect=dialect)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_authorities(file_path: Path) -> list[dict]:
    """Load and normalize the authorities CSV.

    Expected columns (after normalization):
        id, name, pincodes, polygon (JSON ring of [lat, lon]),
        center_lat / latitude, center_lon / longitude,
        jurisdiction_code / state, endpoint_tokens / fcm_tokens
    """
    rows = _read_csv(file_path)
    authorities = []
    for row in rows:
        authority_id = clean_string(row.get("id") or row.get("authority_id"))
        if not authority_id:
            logger.warning("Skipping authority row without id: %s", row)
            continue

        jurisdiction = clean_string(
            row.get("jurisdiction_code") or row.get("state") or row.get("jurisdiction")
        )
        authorities.append({
            "id": authority_id,
            "name": clean_string(row.get("name")) or authority_id,
            "pincodes": parse_code_list(row.get("pincodes") or row.get("pincode")),
            "polygon": parse_polygon(row.get("polygon") or row.get("boundary")),
            "center_lat": _parse_float(row.get("center_lat") or row.get("latitude")),
            "center_lon": _parse_float(row.get("center_lon") or row.get("longitude")),
            "jurisdiction_code": jurisdiction.upper() if jurisdiction else None,
            "endpoint_tokens": parse_code_list(
                row.get("endpoint_tokens") or row.get("fcm_tokens") or row.get("tokens")
            ),
        })
    logger.info("Parsed %d authorities", len(authorities))
    return authorities


def _parse_float(value: str | None) -> float | None:
    """Safely parse a float from a string."""
    if not value:
        return None
    try:
        return float(value.replace(",", ".").strip())
    except (ValueError, AttributeError):
        return None
