"""Tests for the seed tool's file discovery and polygon checks (no database)."""

import logging
import tempfile
from pathlib import Path

from app.tools.seed_db import _check_polygon, _find_csv


def test_find_csv_by_hint():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "notes.csv").write_text("a,b\n")
        (Path(tmpdir) / "TN_Authorities_2024.csv").write_text("id,name\n")

        found = _find_csv(Path(tmpdir), ["authorities", "authority"])
        assert found is not None
        assert found.name == "TN_Authorities_2024.csv"


def test_find_csv_none():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "notes.csv").write_text("a,b\n")
        assert _find_csv(Path(tmpdir), ["authorities"]) is None


def test_check_polygon_warns_on_bad_rings(caplog):
    with caplog.at_level(logging.WARNING):
        _check_polygon("ok", [[0, 0], [0, 1], [1, 1]])
        _check_polygon("none", None)
        assert caplog.text == ""

        _check_polygon("line", [[0, 0], [1, 1]])
        _check_polygon("junk", [[0, "x"]])

    assert "line" in caplog.text
    assert "junk" in caplog.text
