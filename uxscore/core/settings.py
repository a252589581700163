"""uxscore configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides (CLI options, keyword arguments)
2. Environment variables (with UXSCORE_ prefix)
3. Configuration files (uxscore.config.yaml, uxscore.config.yml)
4. Default values

Example usage:
    from uxscore.core.settings import get_settings

    settings = get_settings()
    print(settings.scoring.alpha)

Environment variable support:
    UXSCORE_LOGGING__LEVEL=DEBUG
    UXSCORE_SCORING__MODE=raw
    UXSCORE_SCORING__EXTRA_PULL_THRESHOLD=20
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["uxscore.config.yaml", "uxscore.config.yml"]

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


class ScoringMode(str, Enum):
    """How the combined score relates to the progression target."""

    PROGRESSIVE = "progressive"
    RAW = "raw"


class ScoringSettings(BaseSettings):
    """Score reconciliation settings.

    Defaults reproduce the canonical pipeline: progressive blending with
    alpha 0.35 and an extra pull past 15 points of divergence.
    """

    mode: ScoringMode = Field(
        default=ScoringMode.PROGRESSIVE,
        description="Scoring mode (progressive, raw)",
    )
    alpha: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Weight of the progression target in the blend",
    )
    extra_pull_threshold: int = Field(
        default=15,
        ge=0,
        le=100,
        description="Divergence from target that triggers the extra pull",
    )
    default_total_iterations: int = Field(
        default=3,
        ge=3,
        le=5,
        description="Iteration sequence length used when a record omits it",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}"
            )
        return upper_v


class UXScoreSettings(BaseSettings):
    """Main uxscore configuration settings.

    Example:
        settings = UXScoreSettings(scoring={"mode": "raw"})
        print(settings.scoring.mode)
    """

    model_config = SettingsConfigDict(
        env_prefix="UXSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from a discovered YAML config file under ``data``."""
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if config_path:
            file_config = _load_yaml_config(config_path)
            if file_config:
                logger.debug("Loaded configuration from %s", config_path)
                merged = {**file_config, **data}

                for section in ["scoring", "logging"]:
                    if section in file_config and isinstance(
                        file_config[section], dict
                    ):
                        merged[section] = {
                            **file_config[section],
                            **(
                                data.get(section, {})
                                if isinstance(data.get(section), dict)
                                else {}
                            ),
                        }

                return merged

        return data

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> UXScoreSettings:
    """Get uxscore settings instance.

    Args:
        config_file: Optional explicit path to configuration file.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured UXScoreSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return UXScoreSettings(**merged)

    return UXScoreSettings(**overrides)


def generate_json_schema(output_path: Path | None = None) -> dict[str, Any]:
    """Generate JSON Schema for uxscore configuration files.

    Args:
        output_path: Optional path to write schema file.

    Returns:
        JSON Schema dictionary.
    """
    schema = UXScoreSettings.model_json_schema()
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["title"] = "uxscore Configuration Schema"

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(schema, f, indent=2)
        logger.info("Generated JSON Schema at %s", output_path)

    return schema


def generate_example_config(output_path: Path | None = None) -> str:
    """Generate example configuration file.

    Args:
        output_path: Optional path to write example config file.

    Returns:
        Example configuration as YAML string.
    """
    example = """\
# uxscore configuration
# Environment variables override these values with the UXSCORE_ prefix
# Example: UXSCORE_SCORING__MODE=raw

scoring:
  mode: progressive            # progressive, raw
  alpha: 0.35                  # weight of the progression target (0-1)
  extra_pull_threshold: 15     # divergence that triggers the extra pull
  default_total_iterations: 3  # 3-5

logging:
  level: INFO
  json_output: false
  # file: uxscore.log
"""

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(example)
        logger.info("Generated example config at %s", output_path)

    return example
