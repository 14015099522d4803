"""
config/validator.py — JSON Schema validation for photofolio project files.

Validates ``project.yaml`` against the bundled JSON Schemas.

Usage:
    from photofolio.config.validator import validate_config_file

    issues = validate_config_file(Path("project.yaml"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"

PROJECT_SCHEMA = "project.schema.json"

_SCHEMA_NAMES = [
    "_defs.schema.json",
    PROJECT_SCHEMA,
]


@dataclass
class ValidationIssue:
    """A single validation finding for a project file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "sorting/images/direction"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _load_registry() -> Registry:
    """Build a jsonschema Registry containing all photofolio schemas."""
    resources = []
    for name in _SCHEMA_NAMES:
        schema = _load_schema(name)
        resources.append(
            (schema["$id"], Resource(contents=schema, specification=DRAFT202012))
        )
    return Registry().with_resources(resources)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_config_data(
    data: Any,
    file: Path,
    *,
    registry: Registry | None = None,
) -> list[ValidationIssue]:
    """Validate an already-loaded project document.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    if registry is None:
        registry = _load_registry()

    validator = Draft202012Validator(_load_schema(PROJECT_SCHEMA), registry=registry)

    return [
        ValidationIssue(file=file, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    ]


def validate_config_file(yaml_path: Path) -> list[ValidationIssue]:
    """
    Validate a ``project.yaml`` file.

    An empty file is valid: every setting has a default.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    if not yaml_path.is_file():
        return [ValidationIssue(file=yaml_path, message="Config file does not exist")]

    try:
        with yaml_path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        logger.debug("Config file %s is empty, using defaults", yaml_path)
        return []

    return validate_config_data(raw, yaml_path)
