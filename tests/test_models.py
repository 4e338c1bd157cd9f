"""Tests for Pydantic models."""

import pytest

from tree_guard.models.check_result import (
    CheckStatus,
    CleanTreeResult,
    TodoMatch,
    TodoScanResult,
)


class TestCheckStatus:
    """Test suite for CheckStatus enum."""

    def test_status_values(self):
        """Test a sample of status values."""
        assert CheckStatus.CLEAN.value == "clean"
        assert CheckStatus.NOT_A_REPOSITORY.value == "not_a_repository"
        assert CheckStatus.BEHIND_UPSTREAM.value == "behind_upstream"
        assert CheckStatus.UPSTREAM_QUERY_FAILED.value == "upstream_query_failed"

    def test_status_is_string_enum(self):
        """Test that CheckStatus values are strings."""
        for status in CheckStatus:
            assert isinstance(status.value, str)


class TestCleanTreeResult:
    """Test suite for CleanTreeResult model."""

    def test_clean_result(self):
        result = CleanTreeResult(status=CheckStatus.CLEAN, message="OK")

        assert result.is_clean is True
        assert result.paths == []
        assert result.porcelain == []
        assert result.hint is None
        assert result.commits_behind == 0
        assert result.commits_ahead == 0

    def test_failed_result(self):
        result = CleanTreeResult(
            status=CheckStatus.STAGED_CHANGES,
            message="staged",
            paths=["a.py"],
        )

        assert result.is_clean is False
        assert result.paths == ["a.py"]

    def test_default_lists_are_not_shared(self):
        first = CleanTreeResult(status=CheckStatus.CLEAN, message="OK")
        second = CleanTreeResult(status=CheckStatus.CLEAN, message="OK")

        first.paths.append("x")

        assert second.paths == []

    def test_status_from_string(self):
        result = CleanTreeResult(status="no_upstream", message="none")

        assert result.status == CheckStatus.NO_UPSTREAM


class TestTodoMatch:
    """Test suite for TodoMatch model."""

    def test_str_uses_grep_format(self):
        match = TodoMatch(path="src/app.py", line_number=3, line="# TODO: fix this")

        assert str(match) == "src/app.py:3:# TODO: fix this"

    def test_line_number_must_be_int(self):
        with pytest.raises(ValueError):
            TodoMatch(path="a.py", line_number="three", line="x")


class TestTodoScanResult:
    """Test suite for TodoScanResult model."""

    def test_empty_result_is_clean(self):
        result = TodoScanResult(marker="TODO")

        assert result.is_clean is True
        assert result.files == []

    def test_files_are_distinct_and_ordered(self):
        result = TodoScanResult(
            marker="TODO",
            matches=[
                TodoMatch(path="b.py", line_number=1, line="TODO"),
                TodoMatch(path="a.js", line_number=2, line="todo"),
                TodoMatch(path="b.py", line_number=9, line="ToDo"),
            ],
        )

        assert result.is_clean is False
        assert result.files == ["b.py", "a.js"]
