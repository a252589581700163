"""Unit tests for uxscore.core.exceptions module."""

from uxscore.core.exceptions import (
    LoaderError,
    ParseError,
    UXScoreError,
    ValidationError,
)


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_base_is_exception(self):
        """Test that UXScoreError is an Exception subclass."""
        assert issubclass(UXScoreError, Exception)

    def test_loader_errors(self):
        """Test loader errors derive from LoaderError."""
        assert issubclass(LoaderError, UXScoreError)
        assert issubclass(ParseError, LoaderError)
        assert issubclass(ValidationError, LoaderError)


class TestValidationError:
    """Tests for ValidationError message formatting."""

    def test_plain_message(self):
        """Test message without location."""
        error = ValidationError("bad record")
        assert str(error) == "bad record"
        assert error.field is None

    def test_with_location(self):
        """Test file and field are prefixed."""
        error = ValidationError(
            "iteration: Field required",
            field="versions[0]",
            file_path="v.yaml",
        )
        assert str(error) == (
            "File: v.yaml, Field: versions[0]: iteration: Field required"
        )
        assert error.message == "iteration: Field required"
