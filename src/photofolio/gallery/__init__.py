"""Gallery queries and the site-wide gallery build loop."""

from photofolio.gallery.builder import GalleryBuilder
from photofolio.gallery.loader import (
    ManifestError,
    load_gallery_definitions,
    load_manifest,
    parse_front_matter,
)
from photofolio.gallery.service import (
    query,
    resolve_gallery_sort,
    try_validate_filter,
    validate_filter,
)
from photofolio.gallery.types import GalleryDefinition, GalleryResult

__all__ = [
    "GalleryBuilder",
    "GalleryDefinition",
    "GalleryResult",
    "ManifestError",
    "load_gallery_definitions",
    "load_manifest",
    "parse_front_matter",
    "query",
    "resolve_gallery_sort",
    "try_validate_filter",
    "validate_filter",
]
