"""Loader for version records stored as JSON or YAML."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from uxscore.core.exceptions import ParseError, ValidationError
from uxscore.scoring.models import MIN_TOTAL_ITERATIONS, VersionRecord

logger = logging.getLogger(__name__)

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


class RecordLoader:
    """Load and validate version records from JSON or YAML.

    Accepted document shapes:
    - a single version object
    - a list of version objects
    - an object with a ``versions`` list
    """

    def __init__(self, default_total_iterations: int = MIN_TOTAL_ITERATIONS):
        """Initialize record loader.

        Args:
            default_total_iterations: Used for versions that omit
                ``total_iterations``.
        """
        self.default_total_iterations = default_total_iterations

    def load_file(self, file_path: str | Path) -> list[VersionRecord]:
        """Load version records from a file.

        Args:
            file_path: Path to a .json, .yaml or .yml file

        Returns:
            Validated version records, in file order

        Raises:
            ParseError: If the file is missing or cannot be parsed
            ValidationError: If a version cannot be constructed
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Failed to read {file_path}: {e}") from e

        is_json = file_path.suffix.lower() in JSON_SUFFIXES
        data = self._parse(content, is_json=is_json, source=str(file_path))
        return self._process_data(data, str(file_path))

    def load_string(self, content: str, fmt: str = "yaml") -> list[VersionRecord]:
        """Load version records from a string.

        Args:
            content: Document content
            fmt: "json" or "yaml" (YAML also accepts JSON)

        Returns:
            Validated version records
        """
        data = self._parse(content, is_json=fmt == "json", source="<string>")
        return self._process_data(data, None)

    def _parse(self, content: str, is_json: bool, source: str) -> Any:
        try:
            data = json.loads(content) if is_json else yaml.safe_load(content)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"JSON parsing error in {source} at line {e.lineno}, "
                f"column {e.colno}: {e.msg}"
            ) from e
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                raise ParseError(
                    f"YAML parsing error in {source} at line {mark.line + 1}, "
                    f"column {mark.column + 1}: {getattr(e, 'problem', e)}"
                ) from e
            raise ParseError(f"Failed to parse YAML in {source}: {e}") from e

        if data is None:
            raise ParseError(f"Empty document: {source}")

        return data

    def _process_data(
        self, data: Any, file_path: str | None
    ) -> list[VersionRecord]:
        if isinstance(data, dict) and "versions" in data:
            raw_versions = data["versions"]
        elif isinstance(data, list):
            raw_versions = data
        else:
            raw_versions = [data]

        if not isinstance(raw_versions, list):
            raise ValidationError(
                "'versions' must be a list", field="versions", file_path=file_path
            )

        versions: list[VersionRecord] = []
        for index, raw in enumerate(raw_versions):
            if not isinstance(raw, dict):
                raise ValidationError(
                    "version must be a mapping",
                    field=f"versions[{index}]",
                    file_path=file_path,
                )
            raw = {"total_iterations": self.default_total_iterations, **raw}
            try:
                versions.append(VersionRecord.model_validate(raw))
            except PydanticValidationError as e:
                errors = []
                for error in e.errors():
                    loc = ".".join(str(x) for x in error["loc"])
                    errors.append(f"{loc}: {error['msg']}")
                raise ValidationError(
                    "; ".join(errors),
                    field=f"versions[{index}]",
                    file_path=file_path,
                ) from e

        logger.debug("Loaded %d version record(s)", len(versions))
        return versions
