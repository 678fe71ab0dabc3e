"""
YAML configuration handling.

Loads a conversion configuration from a YAML file or a dictionary and turns
every way it can be wrong into one of the package's typed errors. The checks
run in a fixed order:

1. no targets → ``NoTargetError``
2. unknown report format → ``InvalidFormatError``
3. unknown build tool → ``InvalidBuildToolError``
4. anything else pydantic rejects → ``InvalidArgsError``, one message per problem
"""
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from hpcreport import logger
from hpcreport.config.models import BUILD_TOOLS, ConversionConfig
from hpcreport.exceptions import (
    InvalidArgsError,
    InvalidBuildToolError,
    InvalidFormatError,
    NoTargetError,
    log_and_raise,
)
from hpcreport.reporting import available_formats


def _validation_messages(error: ValidationError) -> List[str]:
    messages = []
    for detail in error.errors():
        field_path = ".".join(str(loc) for loc in detail["loc"])
        messages.append(f"{field_path}: {detail['msg']}" if field_path else detail["msg"])
    return messages


def validate_config_dict(config: Dict[str, Any]) -> ConversionConfig:
    """
    Validate a configuration dictionary.

    Args:
        config: Raw configuration, e.g. from ``yaml.safe_load``

    Returns:
        The validated configuration model

    Raises:
        NoTargetError: If no targets are given
        InvalidFormatError: If ``format`` names no registered renderer
        InvalidBuildToolError: If ``build_tool`` is not a known build tool
        InvalidArgsError: For every other validation failure
    """
    if not isinstance(config, dict):
        log_and_raise(
            InvalidArgsError([f"configuration must be a mapping, got {type(config).__name__}"]),
            logger,
        )

    if not config.get("targets"):
        log_and_raise(NoTargetError(), logger)

    fmt = config.get("format")
    if fmt is not None and str(fmt).lower() not in available_formats():
        log_and_raise(InvalidFormatError(str(fmt)), logger)

    build_tool = config.get("build_tool")
    if build_tool is not None and build_tool not in BUILD_TOOLS:
        log_and_raise(InvalidBuildToolError(str(build_tool)), logger)

    try:
        validated = ConversionConfig.model_validate(config)
    except ValidationError as e:
        messages = _validation_messages(e)
        logger.error(f"Configuration validation failed with {len(messages)} error(s)")
        raise InvalidArgsError(messages) from e

    logger.debug(f"Configuration validated: {len(validated.targets)} target(s), format {validated.format}")
    return validated


def load_config(config_path_or_dict: Union[str, Path, Dict[str, Any]]) -> ConversionConfig:
    """
    Load and validate a YAML configuration file or dictionary.

    Raises:
        InvalidArgsError: If the file cannot be read or is not valid YAML,
            in addition to everything ``validate_config_dict`` raises
    """
    if isinstance(config_path_or_dict, dict):
        return validate_config_dict(config_path_or_dict)

    path = Path(config_path_or_dict)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise InvalidArgsError([f"cannot read configuration {path}: {e.strerror or e}"]) from e
    except yaml.YAMLError as e:
        raise InvalidArgsError([f"invalid YAML in {path}: {e}"]) from e

    logger.debug(f"Loaded configuration from {path}")
    return validate_config_dict(raw if raw is not None else {})


__all__ = ["load_config", "validate_config_dict"]
