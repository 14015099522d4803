"""Image and gallery ordering.

Images are ordered by a resolved ``SortSpec``. Gallery folders are ordered
naturally by name, so ``2 Wedding`` comes before ``10 Portraits``, and may
carry a one- or two-digit sort prefix that is hidden from the display name.
"""

import re
from collections.abc import Callable, Iterable
from typing import TypeVar

from photofolio.core.types import SortDirection
from photofolio.models import ImageRecord
from photofolio.query import ordering
from photofolio.sorting.resolver import SortSpec

T = TypeVar("T")

# "01 Events" → "Events"; "2024 Summer" keeps its year
_SORT_PREFIX = re.compile(r"^(\d{1,2})\s+(.+)$")
_CHUNKS = re.compile(r"(\d+)")


def sort_records(records: Iterable[ImageRecord], spec: SortSpec) -> list[ImageRecord]:
    """Order images by ``spec``: primary key, else fallback, then filename."""
    return ordering.sort_records(
        records, spec.path, spec.direction, spec.fallback_path
    )


def natural_key(name: str) -> tuple:
    """Sort key that orders embedded numbers by value (item2 < item10)."""
    parts = []
    for chunk in _CHUNKS.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), chunk))
        else:
            parts.append((1, 0, chunk.casefold()))
    return (tuple(parts), name)


def sort_natural(
    items: Iterable[T],
    key: Callable[[T], str],
    direction: SortDirection = SortDirection.ASC,
) -> list[T]:
    return sorted(
        items,
        key=lambda item: natural_key(key(item)),
        reverse=direction.descending,
    )


def sort_gallery_names(
    names: Iterable[str],
    direction: SortDirection = SortDirection.ASC,
) -> list[str]:
    """Order gallery folder names naturally."""
    return sort_natural(names, lambda name: name, direction)


def extract_display_name(folder_name: str) -> str:
    """Strip a one- or two-digit sort prefix from a folder name.

    Raises:
        ValueError: If ``folder_name`` is blank
    """
    if not folder_name or not folder_name.strip():
        raise ValueError("Folder name must not be blank")

    match = _SORT_PREFIX.match(folder_name)
    return match.group(2) if match else folder_name
