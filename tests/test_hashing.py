"""Tests for job fingerprint hashing."""

from sponsor_scanner.utils.hashing import (
    FINGERPRINT_DELIMITER,
    compute_job_fingerprint,
    fingerprint_record,
    hash_string,
)

from tests.helpers import make_record


class TestComputeJobFingerprint:
    """Tests for compute_job_fingerprint function."""

    def test_known_fingerprint(self):
        """Test fingerprint matches the md5 of the hyphen-joined fields."""
        result = compute_job_fingerprint("Acme Corp", "Data Engineer", "Austin, TX", "2 days ago")
        assert result == "d14c8f9894327edfc0c5b67206c58cd1"

    def test_all_empty_fields(self):
        """Test empty fields still contribute delimiters."""
        assert compute_job_fingerprint("", "", "", "") == "9efc314b65237d5d646e1b817372afc6"

    def test_none_treated_as_empty(self):
        """Test None fields hash the same as empty strings."""
        assert compute_job_fingerprint("Google", "Data Engineer", None, None) == (
            "2f4222439f953a1c3d081ece42a622ca"
        )
        assert compute_job_fingerprint("Google", "Data Engineer", None, None) == (
            compute_job_fingerprint("Google", "Data Engineer", "", "")
        )

    def test_non_ascii_encoded_as_utf8(self):
        """Test non-ASCII characters are hashed as UTF-8 bytes."""
        result = compute_job_fingerprint("Café Inc", "Ingénieur", "Paris", "1 day ago")
        assert result == "504109625df8f76620221eb93486ad25"

    def test_case_sensitive(self):
        """Test fields are used verbatim without case folding."""
        lower = compute_job_fingerprint("acme corp", "Data Engineer", "Austin, TX", "2 days ago")
        upper = compute_job_fingerprint("Acme Corp", "Data Engineer", "Austin, TX", "2 days ago")
        assert lower != upper

    def test_whitespace_not_trimmed(self):
        """Test surrounding whitespace changes the fingerprint."""
        plain = compute_job_fingerprint("Acme", "DE", "Austin", "today")
        padded = compute_job_fingerprint(" Acme", "DE", "Austin", "today")
        assert plain != padded

    def test_posting_time_changes_fingerprint(self):
        """Test a re-dated posting produces a new fingerprint."""
        day_one = compute_job_fingerprint("Acme", "DE", "Austin", "1 day ago")
        day_two = compute_job_fingerprint("Acme", "DE", "Austin", "2 days ago")
        assert day_one != day_two

    def test_hex_format(self):
        """Test result is 32 lowercase hex characters."""
        result = compute_job_fingerprint("A", "B", "C", "D")
        assert len(result) == 32
        assert all(c in "0123456789abcdef" for c in result)


class TestFingerprintRecord:
    """Tests for fingerprint_record function."""

    def test_uses_record_fields(self):
        """Test record fingerprint equals the field-level fingerprint."""
        record = make_record(
            company_name="Acme Corp",
            job_title="Data Engineer",
            job_location="Austin, TX",
            posting_time="2 days ago",
        )
        assert fingerprint_record(record) == "d14c8f9894327edfc0c5b67206c58cd1"

    def test_ignores_other_fields(self):
        """Test description and apply link do not affect the fingerprint."""
        first = make_record(job_description="one", ats_apply_link="https://a.example")
        second = make_record(job_description="two", ats_apply_link="https://b.example")
        assert fingerprint_record(first) == fingerprint_record(second)


class TestHashString:
    """Tests for hash_string function."""

    def test_delimiter(self):
        """Test the delimiter is a single hyphen."""
        assert FINGERPRINT_DELIMITER == "-"

    def test_matches_fingerprint_of_joined_string(self):
        """Test hash_string of the composite key equals the fingerprint."""
        assert hash_string("Acme Corp-Data Engineer-Austin, TX-2 days ago") == (
            compute_job_fingerprint("Acme Corp", "Data Engineer", "Austin, TX", "2 days ago")
        )
