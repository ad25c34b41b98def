"""Tests for CSV loader functions."""

import csv
import tempfile
from pathlib import Path

from app.adapters.csv_loader.loader import load_authorities


def _write_csv(rows: list[dict], path: Path, encoding: str = "utf-8-sig", delimiter: str = ",") -> None:
    """Helper to write a test CSV file."""
    if not rows:
        return
    with open(path, "w", encoding=encoding, newline="") as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys(), delimiter=delimiter)
        writer.writeheader()
        writer.writerows(rows)


def test_load_authorities_basic():
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "authorities.csv"
        _write_csv([
            {
                "ID": "chn-corp", "Name": "Greater Chennai Corporation",
                "Pincodes": "600001, 600002", "Polygon": "[[12.9, 80.1], [12.9, 80.4], [13.3, 80.4]]",
                "Center Lat": "13.0827", "Center Lon": "80.2707",
                "Jurisdiction Code": "tn", "Endpoint Tokens": "tok-a;tok-b",
            },
            {
                "ID": "tn-state", "Name": "Tamil Nadu State Authority",
                "Pincodes": "", "Polygon": "",
                "Center Lat": "", "Center Lon": "",
                "Jurisdiction Code": "TN", "Endpoint Tokens": "",
            },
        ], csv_path)

        authorities = load_authorities(csv_path)
        assert len(authorities) == 2

        chn = authorities[0]
        assert chn["id"] == "chn-corp"
        assert chn["pincodes"] == ["600001", "600002"]
        assert chn["polygon"] == [[12.9, 80.1], [12.9, 80.4], [13.3, 80.4]]
        assert chn["center_lat"] == 13.0827
        assert chn["center_lon"] == 80.2707
        assert chn["jurisdiction_code"] == "TN"
        assert chn["endpoint_tokens"] == ["tok-a", "tok-b"]

        state = authorities[1]
        assert state["pincodes"] == []
        assert state["polygon"] is None
        assert state["center_lat"] is None
        assert state["endpoint_tokens"] == []


def test_load_authorities_semicolon_and_aliases():
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "authorities.csv"
        _write_csv([
            {
                "authority_id": "blr", "name": "BBMP", "pincode": "560001",
                "latitude": "12,9716", "longitude": "77,5946",
                "state": "ka", "fcm_tokens": "tok-1",
            },
        ], csv_path, delimiter=";")

        authorities = load_authorities(csv_path)
        assert authorities[0]["id"] == "blr"
        assert authorities[0]["pincodes"] == ["560001"]
        assert authorities[0]["center_lat"] == 12.9716
        assert authorities[0]["center_lon"] == 77.5946
        assert authorities[0]["jurisdiction_code"] == "KA"
        assert authorities[0]["endpoint_tokens"] == ["tok-1"]


def test_rows_without_id_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "authorities.csv"
        _write_csv([
            {"id": "", "name": "Nameless"},
            {"id": "a1", "name": ""},
        ], csv_path)

        authorities = load_authorities(csv_path)
        assert [a["id"] for a in authorities] == ["a1"]
        assert authorities[0]["name"] == "a1"


def test_unreadable_polygon_dropped():
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "authorities.csv"
        _write_csv([{"id": "a1", "name": "A", "polygon": "[[13.0, 80.0"}], csv_path)

        assert load_authorities(csv_path)[0]["polygon"] is None
