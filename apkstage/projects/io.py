"""Staging config import.

Loads a StageConfig from a YAML or JSON file. A missing file is not an
error: the defaults apply.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from apkstage.errors import ConfigError
from apkstage.projects.schema import StageConfig

logger = logging.getLogger(__name__)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping, got {type(data).__name__}")
    return data


def load_json(path: Path) -> dict[str, Any]:
    """Load a JSON file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is not an object.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def load_stage_config(path: Path) -> StageConfig:
    """Load and validate a staging config file.

    The file may nest its settings under a top-level ``stage`` key.

    Args:
        path: Path to a .yaml/.yml or .json file.

    Returns:
        Validated StageConfig, or the defaults if the file does not exist.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """
    if not path.exists():
        logger.debug("No staging config at %s, using defaults", path)
        return StageConfig()

    try:
        if path.suffix.lower() == ".json":
            data = load_json(path)
        else:
            data = load_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read staging config {path}: {e}") from e

    if isinstance(data.get("stage"), dict):
        data = data["stage"]

    try:
        return StageConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid staging config {path}: {e}") from e


def merge_overrides(config: StageConfig, **overrides: Any) -> StageConfig:
    """Return a copy of ``config`` with non-None overrides applied and revalidated."""
    values = {k: v for k, v in overrides.items() if v is not None}
    if not values:
        return config
    data = config.model_dump()
    data.update(values)
    try:
        return StageConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid staging option: {e}") from e


__all__ = ["load_json", "load_stage_config", "load_yaml", "merge_overrides"]
