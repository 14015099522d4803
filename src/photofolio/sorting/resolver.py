"""Sort resolution: merge global defaults with per-gallery overrides.

Global configuration supplies the field, direction and fallback used by
every gallery. A gallery may override the field alone (``exif.iso``) or the
field and direction (``exif.iso:asc``). The fallback is never overridden.
"""

from dataclasses import dataclass

from photofolio.core.types import SortDirection
from photofolio.query.errors import ConfigurationError, EvaluationError
from photofolio.query.properties import validate_path

DEFAULT_SORT_FIELD = "dateTaken"
DEFAULT_SORT_DIRECTION = SortDirection.DESC
DEFAULT_FALLBACK_FIELD = "filename"


def _split_path(field: str) -> tuple[str, ...]:
    return tuple(field.split("."))


def _check_field(field: str, role: str) -> None:
    """Validate a configured field name against the property table."""
    if not field:
        raise ConfigurationError(f"Sort {role} must not be empty")
    try:
        validate_path(_split_path(field))
    except EvaluationError as e:
        raise ConfigurationError(
            f"Invalid sort {role} '{field}': {e.message}"
        ) from e


@dataclass(frozen=True)
class SortConfig:
    """Global image sort configuration (``sorting.images`` in project.yaml)."""

    field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = DEFAULT_SORT_DIRECTION
    fallback: str | None = DEFAULT_FALLBACK_FIELD

    @classmethod
    def from_dict(cls, data: dict | None) -> "SortConfig":
        """Build from a config mapping, keeping defaults for missing keys.

        Raises:
            ConfigurationError: If the direction is not asc or desc
        """
        data = data or {}
        try:
            direction = SortDirection.parse(
                data.get("direction", DEFAULT_SORT_DIRECTION)
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(
            field=str(data.get("field") or DEFAULT_SORT_FIELD),
            direction=direction,
            fallback=data.get("fallback", DEFAULT_FALLBACK_FIELD) or None,
        )

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "direction": self.direction.value,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class SortOverride:
    """A gallery's ``sort`` value: a field, optionally with a direction."""

    field: str
    direction: SortDirection | None = None

    @classmethod
    def parse(cls, text: str | None) -> "SortOverride | None":
        """Parse ``field`` or ``field:direction``.

        Returns None for an empty or missing value.

        Raises:
            ConfigurationError: If the field is missing or the direction is
                not asc or desc
        """
        if text is None or not text.strip():
            return None

        field, sep, direction_text = text.strip().partition(":")
        field = field.strip()
        if not field:
            raise ConfigurationError(f"Sort override '{text}' has no field")

        if not sep:
            return cls(field)

        try:
            direction = SortDirection.parse(direction_text)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(field, direction)

    def __str__(self) -> str:
        if self.direction is None:
            return self.field
        return f"{self.field}:{self.direction.value}"


@dataclass(frozen=True)
class SortSpec:
    """A fully resolved image ordering."""

    field: str
    direction: SortDirection
    fallback: str | None = None

    @property
    def path(self) -> tuple[str, ...]:
        return _split_path(self.field)

    @property
    def fallback_path(self) -> tuple[str, ...] | None:
        return _split_path(self.fallback) if self.fallback else None

    def __str__(self) -> str:
        text = f"{self.field} {self.direction.value}"
        if self.fallback:
            text += f" (fallback: {self.fallback})"
        return text


def resolve_sort_spec(
    global_config: SortConfig | None = None,
    override: "SortOverride | str | None" = None,
) -> SortSpec:
    """Merge global configuration with a gallery override.

    Raises:
        ConfigurationError: For unknown field names or bad directions
    """
    global_config = global_config or SortConfig()
    if isinstance(override, str):
        override = SortOverride.parse(override)

    if override is None:
        field, direction = global_config.field, global_config.direction
    else:
        field = override.field
        direction = override.direction or global_config.direction

    _check_field(field, "field")
    if global_config.fallback:
        _check_field(global_config.fallback, "fallback")

    return SortSpec(field, direction, global_config.fallback)
