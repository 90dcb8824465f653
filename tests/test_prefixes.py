"""Tests for the vendor prefix table."""

from __future__ import annotations

import pytest

from espwatch.core.exceptions import PrefixTableError
from espwatch.core.models import VendorPrefix
from espwatch.core.prefixes import (
    ESPRESSIF_PREFIX_DATA,
    PrefixTable,
    default_prefix_table,
    load_prefix_table,
    parse_prefix_record,
)


class TestParsePrefixRecord:
    def test_decodes_hex_and_keeps_display_form(self):
        prefix = parse_prefix_record("782184\t78-21-84")
        assert prefix.raw == b"\x78\x21\x84"
        assert prefix.display == "78-21-84"
        assert prefix.hex == "782184"

    def test_lower_case_hex_is_accepted(self):
        assert parse_prefix_record("a4cf12\tA4-CF-12").raw == b"\xa4\xcf\x12"

    def test_short_prefixes_are_allowed(self):
        assert parse_prefix_record("7821\t78-21").raw == b"\x78\x21"
        assert parse_prefix_record("\tany").raw == b""

    @pytest.mark.parametrize(
        "record",
        [
            "782184",
            "782184\t78-21-84\textra",
            "782184 78-21-84",
            "",
        ],
    )
    def test_wrong_column_count(self, record):
        with pytest.raises(PrefixTableError, match="expected 2 columns"):
            parse_prefix_record(record)

    @pytest.mark.parametrize("hex_column", ["78218G", "78218", "78 21 84", "７８２１８４"])
    def test_invalid_hex(self, hex_column):
        with pytest.raises(PrefixTableError, match="invalid hex prefix"):
            parse_prefix_record(f"{hex_column}\t78-21-84")

    def test_prefix_longer_than_oui(self):
        with pytest.raises(PrefixTableError, match="longer than 3"):
            parse_prefix_record("78218401\t78-21-84-01")

    def test_error_carries_line_number_and_record(self):
        with pytest.raises(PrefixTableError) as excinfo:
            parse_prefix_record("zz\tzz", line_number=7)
        assert excinfo.value.line_number == 7
        assert excinfo.value.record == "zz\tzz"
        assert str(excinfo.value).startswith("line 7:")

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_prefix_record("nope")


class TestPrefixTableConstruction:
    def test_row_count_and_order_preserved(self):
        rows = ["8CCE4E\t8C-CE-4E", "782184\t78-21-84", "240AC4\t24-0A-C4"]
        table = PrefixTable.from_records(rows)
        assert len(table) == 3
        assert [p.hex for p in table] == ["8CCE4E", "782184", "240AC4"]

    def test_text_input_ignores_trailing_newline(self):
        table = load_prefix_table("782184\t78-21-84\n240AC4\t24-0A-C4\n")
        assert len(table) == 2

    def test_duplicates_are_kept(self):
        table = PrefixTable.from_records(["782184\ta", "782184\tb"])
        assert len(table) == 2

    def test_blank_line_inside_table_is_fatal(self):
        with pytest.raises(PrefixTableError) as excinfo:
            PrefixTable.from_records("782184\t78-21-84\n\n240AC4\t24-0A-C4")
        assert excinfo.value.line_number == 2

    def test_malformed_row_yields_no_table(self):
        with pytest.raises(PrefixTableError) as excinfo:
            PrefixTable.from_records(["782184\t78-21-84", "XYZ\tbad", "240AC4\t24-0A-C4"])
        assert excinfo.value.line_number == 2

    def test_constructor_accepts_raw_bytes(self):
        table = PrefixTable([b"\x78\x21\x84", VendorPrefix(raw=b"\x24\x0a\xc4")])
        assert len(table) == 2
        assert all(isinstance(p, VendorPrefix) for p in table)

    def test_empty_table(self):
        table = PrefixTable.from_records([])
        assert len(table) == 0
        assert not table.matches(bytes.fromhex("782184aabbcc"))


class TestEmbeddedTable:
    def test_builds_cleanly(self):
        table = default_prefix_table()
        assert len(table) == 98
        assert len(table) == len(ESPRESSIF_PREFIX_DATA.splitlines())

    def test_every_prefix_is_an_oui(self):
        assert all(len(p.raw) == 3 for p in default_prefix_table())

    def test_display_form_matches_hex(self):
        for prefix in default_prefix_table():
            assert prefix.display.replace("-", "") == prefix.hex

    def test_first_and_last_rows(self):
        prefixes = default_prefix_table().prefixes
        assert prefixes[0].display == "78-21-84"
        assert prefixes[-1].display == "8C-CE-4E"


class TestMatches:
    @pytest.fixture
    def table(self):
        return PrefixTable.from_records(["782184\t78-21-84"])

    def test_matching_address(self, table):
        assert table.matches(bytes.fromhex("782184aabbcc"))

    def test_last_prefix_byte_differs(self, table):
        assert not table.matches(bytes.fromhex("782185aabbcc"))

    def test_address_shorter_than_prefix(self, table):
        assert not table.matches(b"\x78\x21")
        assert not table.matches(b"")

    def test_address_exactly_prefix_length(self, table):
        assert table.matches(b"\x78\x21\x84")

    def test_any_prefix_in_table_can_match(self):
        table = default_prefix_table()
        assert table.matches(bytes.fromhex("8cce4e000001"))
        assert table.matches(bytes.fromhex("240ac4123456"))
        assert not table.matches(bytes.fromhex("001122334455"))

    def test_short_prefix_matches_on_its_own_length(self):
        table = PrefixTable([b"\x78"])
        assert table.matches(bytes.fromhex("78ffffffffff"))
        assert not table.matches(bytes.fromhex("79ffffffffff"))

    def test_empty_prefix_matches_everything(self):
        table = PrefixTable([b""])
        assert table.matches(b"")
        assert table.matches(bytes.fromhex("001122334455"))

    def test_non_mac_length_addresses_are_tolerated(self, table):
        assert table.matches(bytes.fromhex("782184aabbccddeeff"))

    def test_match_returns_first_matching_prefix(self):
        table = PrefixTable.from_records(["7821\tshort", "782184\tlong"])
        matched = table.match(bytes.fromhex("782184aabbcc"))
        assert matched is not None
        assert matched.display == "short"

    def test_match_returns_none_without_match(self, table):
        assert table.match(bytes.fromhex("001122334455")) is None

    def test_contains(self, table):
        assert bytes.fromhex("782184aabbcc") in table
        assert bytearray.fromhex("782184aabbcc") in table
        assert "78:21:84:aa:bb:cc" not in table

    def test_query_has_no_side_effects(self, table):
        before = table.prefixes
        table.matches(bytes.fromhex("782184aabbcc"))
        assert table.prefixes == before
