"""Tests for CSV export."""

import csv
from unittest.mock import patch

import pytest

from sponsor_scanner.domain.models import WorkSetting
from sponsor_scanner.export import FIELDNAMES, append_records, record_to_row, write_records
from tests.helpers import make_record


def read_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


class TestRecordToRow:
    """Tests for record_to_row."""

    def test_row(self):
        """Test values are rendered as plain strings."""
        row = record_to_row(make_record(work_setting=WorkSetting.NOT_SPECIFIED))

        assert row["Company Name"] == "Acme Corp"
        assert row["Work Setting"] == "Not Specified"
        assert row["Scraped At"] == "2025-11-04T12:00:00.000000Z"
        assert list(row) == FIELDNAMES


class TestAppendRecords:
    """Tests for append_records."""

    def test_header_written_once(self, tmp_path):
        """Test appending twice keeps a single header row."""
        path = tmp_path / "results.csv"

        assert append_records(path, [make_record("Acme Corp")]) == 1
        assert append_records(path, [make_record("Google"), make_record("Initech")]) == 2

        rows = read_rows(path)
        assert rows[0] == FIELDNAMES
        assert [row[0] for row in rows[1:]] == ["Acme Corp", "Google", "Initech"]

    def test_column_order(self, tmp_path):
        """Test the fixed column order."""
        path = tmp_path / "results.csv"
        append_records(path, [])

        assert read_rows(path)[0] == [
            "Company Name",
            "Job Title",
            "Posting Time",
            "Job Location",
            "Job Type",
            "Job Description",
            "Work Setting",
            "ATS Apply Link",
            "Scraped At",
        ]

    def test_header_written_to_empty_file(self, tmp_path):
        """Test an existing empty file gets a header."""
        path = tmp_path / "results.csv"
        path.touch()

        append_records(path, [make_record()])

        assert read_rows(path)[0] == FIELDNAMES

    def test_multiline_description(self, tmp_path):
        """Test embedded newlines and commas survive quoting."""
        path = tmp_path / "results.csv"
        description = "Line one, with comma\nLine two \"quoted\""

        append_records(path, [make_record(job_description=description)])

        with open(path, encoding="utf-8", newline="") as f:
            [row] = list(csv.DictReader(f))
        assert row["Job Description"] == description

    def test_creates_parent_directory(self, tmp_path):
        """Test missing parent directories are created."""
        path = tmp_path / "a" / "b" / "results.csv"
        append_records(path, [make_record()])
        assert path.exists()


class TestWriteRecords:
    """Tests for write_records."""

    def test_replaces_file(self, tmp_path):
        """Test existing content is replaced."""
        path = tmp_path / "export.csv"
        write_records(path, [make_record("Acme Corp"), make_record("Google")])

        assert write_records(path, [make_record("Initech")]) == 1

        rows = read_rows(path)
        assert rows[0] == FIELDNAMES
        assert [row[0] for row in rows[1:]] == ["Initech"]
        assert not (tmp_path / "export.csv.tmp").exists()

    def test_failure_keeps_original(self, tmp_path):
        """Test a failed write leaves the previous export untouched."""
        path = tmp_path / "export.csv"
        write_records(path, [make_record("Acme Corp")])
        before = path.read_text(encoding="utf-8")

        def broken_records():
            yield make_record("Google")
            raise OSError("disk full")

        with pytest.raises(OSError):
            write_records(path, broken_records())

        assert path.read_text(encoding="utf-8") == before
        assert not (tmp_path / "export.csv.tmp").exists()

    def test_replace_failure_cleans_tmp(self, tmp_path):
        """Test the temp file is removed when the final move fails."""
        path = tmp_path / "export.csv"

        with patch("sponsor_scanner.export.csv_writer.os.replace", side_effect=OSError("busy")):
            with pytest.raises(OSError):
                write_records(path, [make_record()])

        assert not path.exists()
        assert not (tmp_path / "export.csv.tmp").exists()
