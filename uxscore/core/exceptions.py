"""uxscore exceptions."""


class UXScoreError(Exception):
    """Base exception for all uxscore errors."""


class LoaderError(UXScoreError):
    """Base exception for record loader errors."""


class ValidationError(LoaderError):
    """Record validation error with location information."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        file_path: str | None = None,
    ):
        self.message = message
        self.field = field
        self.file_path = file_path

        location_parts = []
        if file_path:
            location_parts.append(f"File: {file_path}")
        if field:
            location_parts.append(f"Field: {field}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


class ParseError(LoaderError):
    """JSON or YAML parsing error."""
