"""Load the pipeline configuration from an optional YAML file."""

import hashlib
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from src.config.constants import COMPONENT_CONFIG
from src.config.schemas.pipeline import PipelineConfig


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details (loc, msg, type).
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def load_pipeline_config(path: Path | None = None) -> PipelineConfig:
    """Load and validate a pipeline configuration.

    Sections missing from the file keep their built-in defaults; an absent
    path yields the defaults entirely.

    Args:
        path: YAML file to load, or None for defaults.

    Returns:
        Validated PipelineConfig.

    Raises:
        ConfigValidationError: If the file is missing, unparseable or invalid.
    """
    log = logger.bind(component=COMPONENT_CONFIG)

    if path is None:
        log.info("config_defaults_used")
        return PipelineConfig()

    try:
        content = path.read_bytes()
    except FileNotFoundError as e:
        log.error("config_file_not_found", file_path=str(path))
        raise ConfigValidationError(
            [{"loc": "file", "msg": str(e), "type": "file_not_found"}], str(path)
        ) from e

    try:
        data = yaml.safe_load(content.decode("utf-8")) or {}
    except yaml.YAMLError as e:
        log.error("config_yaml_parse_error", file_path=str(path), error=str(e))
        raise ConfigValidationError(
            [{"loc": "yaml", "msg": str(e), "type": "yaml_parse_error"}], str(path)
        ) from e

    try:
        config = PipelineConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(loc) for loc in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        log.error(
            "config_validation_failed",
            file_path=str(path),
            validation_error_count=len(errors),
            errors=errors,
        )
        raise ConfigValidationError(errors, str(path)) from e

    log.info(
        "config_loaded",
        file_path=str(path),
        file_sha256=hashlib.sha256(content).hexdigest(),
        source_count=len(config.sources.sources),
    )
    return config
