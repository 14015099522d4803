"""Project configuration loading and validation."""

from photofolio.config.loader import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    ProjectConfig,
    ProjectConfigError,
    SortingConfig,
)
from photofolio.config.validator import (
    ValidationIssue,
    validate_config_data,
    validate_config_file,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "ProjectConfig",
    "ProjectConfigError",
    "SortingConfig",
    "ValidationIssue",
    "validate_config_data",
    "validate_config_file",
]
