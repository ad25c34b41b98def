"""Tests for CSV normalizer functions."""

from app.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_code_list,
    parse_polygon,
)

# ─── normalize_column_name ───────────────────────────────────────────


def test_strip_trailing_spaces():
    assert normalize_column_name("  Name  ") == "name"


def test_remove_bom():
    assert normalize_column_name("\ufeffid") == "id"


def test_replace_spaces_with_underscore():
    assert normalize_column_name("Center Lat") == "center_lat"


def test_non_breaking_space():
    assert normalize_column_name("Jurisdiction\u00a0Code") == "jurisdiction_code"


def test_multiple_spaces():
    assert normalize_column_name("Endpoint   Tokens") == "endpoint_tokens"


def test_strips_punctuation():
    assert normalize_column_name("Pincodes (comma-separated)") == "pincodes_commaseparated"


def test_bom_plus_trailing_space():
    """Combined BOM + trailing spaces (common in spreadsheet exports)."""
    assert normalize_column_name("\ufeff  Polygon  ") == "polygon"


# ─── clean_string ────────────────────────────────────────────────────


def test_clean_string_strips():
    assert clean_string("  hello  ") == "hello"


def test_clean_string_empty_to_none():
    assert clean_string("   ") is None
    assert clean_string("") is None


def test_clean_string_none():
    assert clean_string(None) is None


# ─── parse_code_list ─────────────────────────────────────────────────


def test_parse_codes_comma_separated():
    assert parse_code_list("600001, 600002, 600003") == ["600001", "600002", "600003"]


def test_parse_codes_semicolon_and_spaces():
    assert parse_code_list("600001;600002 600003") == ["600001", "600002", "600003"]


def test_parse_codes_keeps_order_and_drops_duplicates():
    assert parse_code_list("tok-b, tok-a, tok-b") == ["tok-b", "tok-a"]


def test_parse_codes_empty():
    assert parse_code_list("") == []
    assert parse_code_list(None) == []
    assert parse_code_list(" , ; ") == []


# ─── parse_polygon ───────────────────────────────────────────────────


def test_parse_polygon_json_ring():
    assert parse_polygon("[[13.0, 80.0], [13.1, 80.0], [13.1, 80.1]]") == [
        [13.0, 80.0], [13.1, 80.0], [13.1, 80.1],
    ]


def test_parse_polygon_empty():
    assert parse_polygon("") is None
    assert parse_polygon(None) is None


def test_parse_polygon_invalid_json():
    assert parse_polygon("[[13.0, 80.0], [13.1") is None


def test_parse_polygon_not_a_list():
    assert parse_polygon('{"lat": 13.0}') is None


def test_parse_polygon_vertices_not_validated_here():
    assert parse_polygon('[["a", "b"]]') == [["a", "b"]]
