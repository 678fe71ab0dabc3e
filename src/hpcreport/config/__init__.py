"""Configuration models and loading."""

from .models import BUILD_TOOLS, DEFAULT_MIX_DIRS, ConversionConfig, TargetSpec
from .yaml_config import load_config, validate_config_dict

__all__ = [
    "BUILD_TOOLS",
    "DEFAULT_MIX_DIRS",
    "ConversionConfig",
    "TargetSpec",
    "load_config",
    "validate_config_dict",
]
