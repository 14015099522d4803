"""Project configuration (``project.yaml``)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from photofolio.config.validator import ValidationIssue, validate_config_data
from photofolio.core.types import SortDirection
from photofolio.query.errors import ConfigurationError
from photofolio.sorting.resolver import SortConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PHOTOFOLIO_CONFIG"
CONFIG_FILENAME = "project.yaml"


class ProjectConfigError(Exception):
    """Raised when ``project.yaml`` cannot be loaded or fails validation."""

    def __init__(self, file: Path, issues: list[ValidationIssue]):
        self.file = file
        self.issues = issues
        details = "; ".join(str(i) for i in issues)
        super().__init__(f"Invalid project config {file}: {details}")


@dataclass(frozen=True)
class SortingConfig:
    """The ``sorting`` section.

    Attributes:
        galleries: Direction for gallery folders (natural name order)
        images: Default image ordering for every gallery
    """

    galleries: SortDirection = SortDirection.ASC
    images: SortConfig = field(default_factory=SortConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SortingConfig:
        data = data or {}
        try:
            galleries = SortDirection.parse(data.get("galleries", SortDirection.ASC))
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(galleries=galleries, images=SortConfig.from_dict(data.get("images")))


@dataclass(frozen=True)
class ProjectConfig:
    """Site-wide settings consumed by the gallery build."""

    name: str = ""
    sorting: SortingConfig = field(default_factory=SortingConfig)
    path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> ProjectConfig:
        return cls(
            name=str(data.get("name") or ""),
            sorting=SortingConfig.from_dict(data.get("sorting")),
            path=path,
        )

    @classmethod
    def load(cls, path: Path) -> ProjectConfig:
        """Load and validate a project file.

        Raises:
            ProjectConfigError: If the file is missing, not YAML or invalid
        """
        if not path.is_file():
            raise ProjectConfigError(
                path, [ValidationIssue(file=path, message="Config file does not exist")]
            )

        try:
            with path.open(encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ProjectConfigError(
                path, [ValidationIssue(file=path, message=f"YAML parse error: {exc}")]
            ) from exc

        if data is None:
            data = {}

        issues = validate_config_data(data, path)
        if issues:
            raise ProjectConfigError(path, issues)

        logger.debug("Loaded project config from %s", path)
        return cls.from_dict(data, path)

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> ProjectConfig:
        """Locate and load the project config.

        Resolution order:
        1. PHOTOFOLIO_CONFIG env var (path to a project file)
        2. {base_path}/project.yaml, if it exists
        3. Built-in defaults
        """
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return cls.load(Path(env_path))

        if base_path:
            candidate = base_path / CONFIG_FILENAME
            if candidate.is_file():
                return cls.load(candidate)

        logger.debug("No project config found, using defaults")
        return cls()
