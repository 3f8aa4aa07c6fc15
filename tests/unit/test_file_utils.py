# ============================================================================
# tests/unit/test_file_utils.py
# ============================================================================
"""
Tests for file and logging helpers
"""

import pytest

from questionnaire_report.utils.file_utils import (
    list_json_files,
    reset_directory,
    sanitize_filename,
    validate_json_file,
)
from questionnaire_report.utils.exceptions import EmptyResourceFileError, OversizedResourceFileError
from questionnaire_report.utils.logging import TRUNCATION_SUFFIX, truncate_message


class TestSanitizeFilename:

    @pytest.mark.parametrize("original, expected", [
        ("Jane Doe.json", "jane-doe"),
        ("report_2024.v2.json", "report_2024.v2"),
        ("  --weird!!name--.json", "weird-name"),
        ("Müller, Anna.json", "m-ller-anna"),
        ("!!!.json", "unnamed-file"),
        ("notes.JSON", "notes.json"),
    ])
    def test_sanitize(self, original, expected):
        assert sanitize_filename(original) == expected

    def test_max_length(self):
        result = sanitize_filename("a" * 150 + ".json")
        assert result == "a" * 100

    def test_trailing_dash_removed_after_cut(self):
        assert sanitize_filename("abcd efgh.json", max_length=5) == "abcd"


class TestDirectories:

    def test_list_json_files_sorted(self, tmp_path):
        for name in ["b.json", "a.json", "c.txt"]:
            (tmp_path / name).write_text("{}")
        (tmp_path / "sub.json").mkdir()

        assert [p.name for p in list_json_files(tmp_path)] == ["a.json", "b.json"]

    def test_list_missing_directory(self, tmp_path):
        assert list_json_files(tmp_path / "missing") == []

    def test_reset_directory(self, tmp_path):
        target = tmp_path / "out"
        (target / "nested").mkdir(parents=True)
        (target / "old.pdf").write_text("x")

        reset_directory(target)

        assert target.is_dir()
        assert list(target.iterdir()) == []


class TestValidateJsonFile:

    def test_size_returned(self, tmp_path):
        path = tmp_path / "a.json"
        path.write_text("{}")
        assert validate_json_file(path, max_bytes=1024) == 2

    def test_empty(self, tmp_path):
        path = tmp_path / "a.json"
        path.write_text("")
        with pytest.raises(EmptyResourceFileError):
            validate_json_file(path, max_bytes=1024)

    def test_oversized_message(self, tmp_path):
        path = tmp_path / "big.json"
        path.write_bytes(b"x" * (2 * 1024 * 1024 + 1))
        with pytest.raises(OversizedResourceFileError, match="exceeds maximum size of 2MB"):
            validate_json_file(path, max_bytes=2 * 1024 * 1024)


class TestTruncateMessage:

    def test_short_message_unchanged(self):
        assert truncate_message("boom", 200) == "boom"

    def test_long_message_cut(self):
        message = truncate_message("x" * 500, 200)
        assert message == "x" * 200 + TRUNCATION_SUFFIX
