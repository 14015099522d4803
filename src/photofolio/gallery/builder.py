"""Build every gallery of a site from the shared image pool.

A failing gallery (bad filter, unknown sort field) is logged and reported
but never stops its siblings from being built.
"""

import logging
from collections.abc import Sequence

from photofolio.gallery.service import query
from photofolio.gallery.types import GalleryDefinition, GalleryResult
from photofolio.models import ImageRecord
from photofolio.query.cache import QueryCache
from photofolio.query.errors import FilterError
from photofolio.sorting.resolver import SortConfig

logger = logging.getLogger(__name__)


class GalleryBuilder:
    """Resolves the images of each gallery.

    Filtered galleries draw from the whole pool; traditional galleries use
    the images stored in their own folder.

    Usage:
        builder = GalleryBuilder(pool, SortConfig())
        results = builder.build_all(definitions)
    """

    def __init__(
        self,
        pool: Sequence[ImageRecord],
        sort_config: SortConfig | None = None,
        cache: QueryCache | None = None,
    ):
        self.pool = list(pool)
        self.sort_config = sort_config or SortConfig()
        self.cache = cache or QueryCache()

    def images_in_folder(self, path: str) -> list[ImageRecord]:
        return [r for r in self.pool if r.folder == path]

    def build(self, gallery: GalleryDefinition) -> GalleryResult:
        """Build one gallery.

        Raises:
            FilterError: If the filter or sort cannot be parsed or evaluated
        """
        if gallery.is_filtered:
            images = query(
                self.pool,
                gallery.filter,
                gallery.sort,
                self.sort_config,
                cache=self.cache,
            )
        else:
            images = query(
                self.images_in_folder(gallery.path),
                None,
                gallery.sort,
                self.sort_config,
                cache=self.cache,
            )
        return GalleryResult(gallery, images)

    def build_all(self, galleries: Sequence[GalleryDefinition]) -> list[GalleryResult]:
        """Build every gallery, isolating failures per gallery."""
        results = []

        for gallery in galleries:
            try:
                result = self.build(gallery)
            except FilterError as e:
                logger.error(
                    "Gallery '%s' failed to build:\n%s", gallery.path, e.detail()
                )
                result = GalleryResult(gallery, error=e.detail())
            else:
                logger.debug(
                    "Gallery '%s': %d image(s)", gallery.path, len(result.images)
                )
            results.append(result)

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Built %d gallery(ies), %d failed", len(results) - failed, failed
        )
        return results
