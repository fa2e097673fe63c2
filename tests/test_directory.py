"""Tests for ipeds/directory.py — HD institution directory."""
import pytest

from conftest import write_csv
from ipeds.directory import (
    InstitutionDirectory,
    InstitutionRecord,
    control_label,
    find_directory_file,
)
from ipeds.errors import DirectoryLoadError


class TestControlLabel:
    @pytest.mark.parametrize("code, label", [
        ("1", "Public"),
        ("2", "Private nonprofit"),
        ("3", "Private for-profit"),
        ("", "Unknown"),
        (None, "Unknown"),
        ("-3", "Other"),
        ("9", "Other"),
        # SECTOR codes share CONTROL's leading digit
        ("1 ", "Public"),
    ])
    def test_labels(self, code, label):
        assert control_label(code) == label


class TestLoad:
    def test_loads_records(self, directory):
        assert len(directory) == 3
        acme = directory.lookup("100654")
        assert acme == InstitutionRecord(
            unitid="100654",
            instnm="Acme University",
            stabbr="AL",
            control="Public",
            carnegie="16",
            webaddr="www.acme.edu/",
        )

    def test_optional_fields_become_none(self, directory):
        beta = directory.lookup("100663")
        assert beta.webaddr is None
        assert beta.control == "Private nonprofit"
        gamma = directory.lookup("100690")
        assert gamma.carnegie is None
        assert gamma.control == "Private for-profit"

    def test_rows_without_unitid_skipped(self, directory):
        assert "" not in directory

    def test_lookup_absent_returns_none(self, directory):
        assert directory.lookup("999999") is None

    def test_to_dict_field_order(self, directory):
        d = directory.lookup("100654").to_dict()
        assert list(d) == ["unitid", "instnm", "stabbr", "control", "carnegie", "webaddr"]

    def test_alternate_headers(self, tmp_path):
        path = write_csv(
            tmp_path / "hd.csv",
            ["unitid", "instnm", "stabbr", "SECTOR", "C18BASIC"],
            [("200", "Delta College", "CA", "4", "15")],
        )
        record = InstitutionDirectory.load(path).lookup("200")
        assert record.instnm == "Delta College"
        assert record.control == "Other"
        assert record.carnegie == "15"
        assert record.webaddr is None

    def test_bom_header(self, tmp_path):
        path = tmp_path / "hd_bom.csv"
        path.write_bytes("\ufeffUNITID,INSTNM\r\n300,Epsilon U\r\n".encode("utf-8"))
        assert InstitutionDirectory.load(path).lookup("300").instnm == "Epsilon U"

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(DirectoryLoadError):
            InstitutionDirectory.load(tmp_path / "HD_2023.csv")

    def test_no_unitid_column_is_fatal(self, tmp_path):
        path = write_csv(tmp_path / "hd.csv", ["NAME", "STATE"], [("Acme", "AL")])
        with pytest.raises(DirectoryLoadError, match="UNITID"):
            InstitutionDirectory.load(path)

    def test_from_rows(self):
        directory = InstitutionDirectory.from_rows([
            {"UNITID": "1", "INSTNM": "One"},
            {"UNITID": "  ", "INSTNM": "Blank"},
        ])
        assert len(directory) == 1
        assert directory.lookup("1").control == "Unknown"


class TestFindDirectoryFile:
    def test_picks_newest(self, tmp_path):
        for name in ("HD2021.csv", "hd_2023.csv", "HD_2022.csv", "C_2023.csv"):
            (tmp_path / name).write_text("UNITID\n")
        assert find_directory_file(tmp_path).name == "hd_2023.csv"

    def test_none_found(self, tmp_path):
        with pytest.raises(DirectoryLoadError):
            find_directory_file(tmp_path)
