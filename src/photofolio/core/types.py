"""Shared enums used by both the query language and sort configuration."""

from enum import Enum


class SortDirection(Enum):
    """Sort direction.

    Config and front matter values are "asc" or "desc" (case-insensitive).
    """

    ASC = "asc"    # A → Z, 1 → 9, oldest → newest
    DESC = "desc"  # Z → A, 9 → 1, newest → oldest

    @classmethod
    def parse(cls, value: "str | SortDirection") -> "SortDirection":
        """Parse a direction string.

        Raises:
            ValueError: If the value is not asc or desc
        """
        if isinstance(value, SortDirection):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid sort direction '{value}' (expected 'asc' or 'desc')"
            ) from None

    @property
    def descending(self) -> bool:
        return self is SortDirection.DESC
