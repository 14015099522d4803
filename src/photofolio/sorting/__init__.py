"""Sort resolution and ordering for images and gallery folders."""

from photofolio.sorting.resolver import (
    DEFAULT_FALLBACK_FIELD,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    SortConfig,
    SortOverride,
    SortSpec,
    resolve_sort_spec,
)
from photofolio.sorting.sorter import (
    extract_display_name,
    natural_key,
    sort_gallery_names,
    sort_natural,
    sort_records,
)

__all__ = [
    "DEFAULT_FALLBACK_FIELD",
    "DEFAULT_SORT_DIRECTION",
    "DEFAULT_SORT_FIELD",
    "SortConfig",
    "SortOverride",
    "SortSpec",
    "extract_display_name",
    "natural_key",
    "resolve_sort_spec",
    "sort_gallery_names",
    "sort_natural",
    "sort_records",
]
