"""Tests for roster parsing: version cell, row shape, normalization."""

from __future__ import annotations

import pytest

from fakes.rosters import HEADER, make_csv_roster, make_roster, make_xlsx_bytes, user_row
from sigdeploy.core.exceptions import (
    DuplicateIdentity,
    EmptyRoster,
    MalformedRoster,
    MalformedVersionCell,
    TruncatedRow,
)
from sigdeploy.roster.parser import parse_roster, parse_version


class TestParseVersion:
    def test_strips_prefix_and_whitespace(self):
        assert parse_version("Version: 1.0").token == "1.0"

    def test_prefix_is_case_insensitive(self):
        assert parse_version("version:2024-03").token == "2024-03"

    def test_missing_prefix_raises(self):
        with pytest.raises(MalformedVersionCell):
            parse_version("1.0")

    def test_empty_token_raises(self):
        with pytest.raises(MalformedVersionCell):
            parse_version("Version:   ")

    def test_missing_cell_raises(self):
        with pytest.raises(MalformedVersionCell):
            parse_version(None)

    def test_inner_spaces_are_kept(self):
        assert parse_version("Version: 2024 Q1").token == "2024 Q1"

    @pytest.mark.parametrize(
        "cell",
        ["Version: 2024/05", r"Version: 2024\05", "Version: 1.0 (EU)", "Version: a:b", "Version: 1.", "Version: v?"],
    )
    def test_token_unusable_in_file_names_raises(self, cell):
        with pytest.raises(MalformedVersionCell):
            parse_version(cell)


class TestParseRoster:
    def test_parses_version_and_records(self, settings):
        roster = parse_roster(make_roster(user_row(), user_row("john@acme.sk")), settings)
        assert roster.version.token == "1.0"
        assert [r.identity for r in roster.records] == ["jane.doe@acme.sk", "john@acme.sk"]

    def test_header_row_is_ignored(self, settings):
        data = make_xlsx_bytes([["Version:1.0"], ["garbage"] * 18, user_row()])
        roster = parse_roster(data, settings)
        assert roster.records[0].display_name == "Jane Doe"

    def test_fields_mapped_by_position(self, settings):
        record = parse_roster(make_roster(user_row()), settings).records[0]
        assert record.mail_address == "jane.doe@acme.sk"
        assert record.city == "Bratislava"
        assert record.postal_code == "811 01"
        assert record.set_as_new_default is True
        assert record.set_as_reply_default is False

    def test_is_deterministic(self, settings):
        data = make_roster(user_row(), user_row("john@acme.sk"))
        assert parse_roster(data, settings) == parse_roster(data, settings)

    def test_trims_text_fields(self, settings):
        record = parse_roster(make_roster(user_row(displayName="  Jane Doe  ")), settings).records[0]
        assert record.display_name == "Jane Doe"

    def test_empty_country_falls_back(self, settings):
        record = parse_roster(make_roster(user_row(country=None)), settings).records[0]
        assert record.country == "Slovakia"

    def test_company_suffix_normalized(self, settings):
        record = parse_roster(make_roster(user_row(companyName="Acme s r o")), settings).records[0]
        assert record.company_name == "Acme, s.r.o."

    def test_text_flags_accepted(self, settings):
        record = parse_roster(
            make_roster(user_row(setAsNewDefault="no", setAsReplyDefault="Yes")), settings
        ).records[0]
        assert record.set_as_new_default is False
        assert record.set_as_reply_default is True

    def test_row_without_identity_is_skipped(self, settings):
        roster = parse_roster(make_roster(user_row(identity=None), user_row("john@acme.sk")), settings)
        assert [r.identity for r in roster.records] == ["john@acme.sk"]

    def test_blank_rows_are_skipped(self, settings):
        data = make_xlsx_bytes([["Version:1.0"], HEADER, user_row(), [None] * 18, user_row("john@acme.sk")])
        assert len(parse_roster(data, settings).records) == 2

    def test_find_is_case_insensitive(self, settings):
        roster = parse_roster(make_roster(user_row()), settings)
        assert roster.find("Jane.Doe@ACME.sk") is not None
        assert roster.find("nobody@acme.sk") is None


class TestParseRosterErrors:
    def test_malformed_version_cell(self, settings):
        with pytest.raises(MalformedVersionCell):
            parse_roster(make_roster(user_row(), version="1.0"), settings)

    def test_empty_roster(self, settings):
        with pytest.raises(EmptyRoster):
            parse_roster(make_xlsx_bytes([["Version:1.0"], HEADER]), settings)

    def test_truncated_csv_row_aborts(self, settings):
        data = make_csv_roster(user_row(), user_row("john@acme.sk")[:10])
        with pytest.raises(TruncatedRow) as exc_info:
            parse_roster(data, settings)
        assert exc_info.value.row_number == 4
        assert exc_info.value.found == 10

    def test_narrow_sheet_is_truncated(self, settings):
        data = make_xlsx_bytes([["Version:1.0"], HEADER[:17], user_row()[:17]])
        with pytest.raises(TruncatedRow):
            parse_roster(data, settings)

    def test_duplicate_identity(self, settings):
        data = make_roster(user_row(), user_row("JANE.DOE@acme.sk"))
        with pytest.raises(DuplicateIdentity):
            parse_roster(data, settings)

    def test_undecodable_bytes(self, settings):
        with pytest.raises(MalformedRoster):
            parse_roster(b"\xff\xfe\x00garbage\x81", settings)


class TestParseCsv:
    def test_csv_roster_parses_like_xlsx(self, settings):
        roster = parse_roster(make_csv_roster(user_row()), settings)
        assert roster.version.token == "1.0"
        record = roster.records[0]
        assert record.company_name == "Acme, s.r.o."
        assert record.set_as_new_default is True
        assert record.street_address == "Hlavná 1"
