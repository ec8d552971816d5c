from __future__ import annotations

from dimcheck.models.reference_entry import ColumnRange
from dimcheck.spec.table import (
    build_spec_table,
    dimension_columns,
    find_name_column,
    find_size_column,
)

HEADER = ["SKU", "Product Name", "Size", "Width", "Depth", "Height", "Phone"]


def _rows() -> list[dict[str, object]]:
    return [
        {"SKU": "SKU-20240501", "Product Name": " Round Side Table ", "Size": "Small",
         "Width": 24, "Depth": "24", "Height": 22, "Phone": "555-0100"},
        {"SKU": "A-2", "Product Name": "Lounge Chair", "Size": None,
         "Width": "30 x 32", "Depth": None, "Height": 28.5, "Phone": None},
        {"SKU": None, "Product Name": None, "Size": None,
         "Width": 1, "Depth": 2, "Height": 3, "Phone": None},
        {"SKU": "X", "Product Name": "***", "Size": None,
         "Width": 1, "Depth": 2, "Height": 3, "Phone": None},
    ]


def test_empty_rows_give_empty_table():
    assert build_spec_table([], ColumnRange("D", "F")) == ()
    assert build_spec_table([], None) == ()


def test_name_column_pattern_order():
    assert find_name_column(["Item Name", "Model", "Product"]) == "Product"
    assert find_name_column(["Item Name", "Model Name"]) == "Model Name"
    assert find_name_column(["Display name", "Name"]) == "Name"
    assert find_name_column(["Code", " Product  Name "]) == " Product  Name "
    assert find_name_column(["Code", "Vendor name"]) == "Vendor name"
    assert find_name_column(["Code", "Width"]) == "Product Name"


def test_size_column_detection():
    assert find_size_column(["Name", "dimension", "Size"]) == "dimension"
    assert find_size_column(["Name", "Sizes"]) is None


def test_heuristic_dimension_columns_skip_metadata():
    assert dimension_columns(["Product Name", "Size", "Depth", "Height", "Row #", "Model", "Notes"], None) == [
        "Depth",
        "Height",
        "Notes",
    ]


def test_build_with_column_range():
    table = build_spec_table(_rows(), ColumnRange("D", "F"), header=HEADER)
    assert [e.product_name for e in table] == ["Round Side Table", "Lounge Chair"]
    round_table, chair = table
    assert round_table.product_slug == "round-side-table"
    assert round_table.size == "Small"
    assert round_table.expected_dimensions == (22.0, 24.0, 24.0)
    assert chair.size == ""
    assert chair.expected_dimensions == (28.5, 30.0, 32.0)
    assert chair.source_row["SKU"] == "A-2"


def test_build_without_range_uses_heuristic_and_bounds():
    table = build_spec_table(_rows(), None, header=HEADER)
    round_table = table[0]
    # SKU column is metadata; Phone is scanned but 555 is in range and -100 is not
    # "Width" contains "id" and is treated as metadata as well
    assert round_table.expected_dimensions == (22.0, 24.0, 555.0)


def test_sku_like_values_never_become_dimensions():
    rows = [{"Product Name": "Desk", "Code": "SKU-20240501", "Length": 48}]
    table = build_spec_table(rows, ColumnRange("B", "C"))
    assert table[0].expected_dimensions == (48.0,)


def test_out_of_range_values_are_dropped():
    rows = [{"Name": "Shelf", "A": 0, "B": -5, "C": 2000, "D": 1999.9, "E": "12 x 2500"}]
    table = build_spec_table(rows, ColumnRange("B", "F"))
    assert table[0].expected_dimensions == (12.0, 1999.9)


def test_numeric_product_name_is_rendered_without_decimal():
    rows = [{"Model": 4471.0, "H": 10}]
    table = build_spec_table(rows, None)
    assert table[0].product_name == "4471"
    assert table[0].product_slug == "4471"


def test_header_defaults_to_first_row_keys():
    rows = [{"Product": "Bench", "L": 60, "W": 16}]
    table = build_spec_table(rows, ColumnRange("B", "C"))
    assert table[0].expected_dimensions == (16.0, 60.0)


def test_build_is_deterministic():
    first = build_spec_table(_rows(), ColumnRange("D", "F"), header=HEADER)
    second = build_spec_table(_rows(), ColumnRange("D", "F"), header=HEADER)
    assert first == second
    assert [e.expected_dimensions for e in first] == [e.expected_dimensions for e in second]


def test_range_change_rebuilds_different_table():
    narrow = build_spec_table(_rows(), ColumnRange("D", "D"), header=HEADER)
    assert narrow[0].expected_dimensions == (24.0,)
    assert narrow[1].expected_dimensions == (30.0, 32.0)


def test_inverted_range_gives_no_dimensions_but_keeps_rows():
    table = build_spec_table(_rows(), ColumnRange("F", "D"), header=HEADER)
    assert len(table) == 2
    assert all(e.expected_dimensions == () for e in table)
