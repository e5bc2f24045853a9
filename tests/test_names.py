"""Tests for name normalization and path splitting."""

import pytest

from treefs.vfs.errors import InvalidNameError
from treefs.vfs.names import MAX_NAME_LENGTH, normalize_name, split_path


class TestNormalizeName:
    """Test reduction of raw tokens to canonical names."""

    def test_plain_name_unchanged(self):
        assert normalize_name("docs") == "docs"

    def test_root_name_unchanged(self):
        assert normalize_name("/") == "/"

    def test_leading_separators_dropped(self):
        assert normalize_name("//docs") == "docs"

    def test_trailing_separators_dropped(self):
        assert normalize_name("docs///") == "docs"

    def test_repeated_separators_collapse(self):
        assert normalize_name("a//b///c") == "a/b/c"

    @pytest.mark.parametrize("raw", ["", "//", "///"])
    def test_empty_result_rejected(self, raw):
        with pytest.raises(InvalidNameError):
            normalize_name(raw)

    def test_name_at_limit_accepted(self):
        name = "x" * MAX_NAME_LENGTH
        assert normalize_name(name) == name

    def test_name_over_limit_rejected(self):
        with pytest.raises(InvalidNameError, match="longer than"):
            normalize_name("x" * (MAX_NAME_LENGTH + 1))

    def test_limit_applies_after_normalization(self):
        """Separators stripped during normalization do not count."""
        name = "x" * MAX_NAME_LENGTH
        assert normalize_name("///" + name + "///") == name

    def test_limit_counts_bytes(self):
        # Each "é" is two bytes in UTF-8
        with pytest.raises(InvalidNameError):
            normalize_name("é" * (MAX_NAME_LENGTH // 2 + 1))

    def test_case_is_preserved(self):
        assert normalize_name("Docs") == "Docs"


class TestSplitPath:
    """Test splitting paths into segments."""

    def test_relative_path(self):
        assert split_path("a/b") == (False, ["a", "b"])

    def test_absolute_path(self):
        assert split_path("/a/b") == (True, ["a", "b"])

    def test_empty_segments_skipped(self):
        assert split_path("a//b/") == (False, ["a", "b"])

    def test_root(self):
        assert split_path("/") == (True, [])

    def test_empty(self):
        assert split_path("") == (False, [])
