"""Gallery query facade.

Combines the filter engine and sort resolution into the one call the
rendering layer needs: given the image pool, a gallery's filter and sort
strings and the global sort configuration, return the gallery's images in
display order.
"""

import logging
from collections.abc import Sequence

from photofolio.models import ImageRecord
from photofolio.query.cache import QueryCache
from photofolio.query.errors import FilterError
from photofolio.query.evaluator import Evaluator, apply_pipeline, filter_records
from photofolio.query.parser import parse
from photofolio.sorting.resolver import SortConfig, SortOverride, SortSpec, resolve_sort_spec
from photofolio.sorting.sorter import sort_records

logger = logging.getLogger(__name__)

_default_cache = QueryCache()


def resolve_gallery_sort(
    sort_override: str | None,
    global_sort: SortConfig | None = None,
    cache: QueryCache | None = None,
) -> SortSpec:
    """Resolve (and cache) the sort spec for a gallery's ``sort`` value.

    Raises:
        ConfigurationError: For unknown fields or bad directions
    """
    global_sort = global_sort or SortConfig()
    cache = cache or _default_cache
    key = ("sort", global_sort, (sort_override or "").strip())
    return cache.get_or_compute(
        key,
        lambda: resolve_sort_spec(global_sort, SortOverride.parse(sort_override)),
    )


def query(
    pool: Sequence[ImageRecord],
    filter_expr: str | None,
    sort_override: str | None = None,
    global_sort: SortConfig | None = None,
    *,
    cache: QueryCache | None = None,
) -> list[ImageRecord]:
    """Return a gallery's images in display order.

    Args:
        pool: Every image of the site
        filter_expr: The gallery's filter, or None/empty for a traditional
            gallery (the pool is then the gallery's own images)
        sort_override: The gallery's ``sort`` value (``field`` or
            ``field:direction``), or None
        global_sort: Site-wide image sort configuration
        cache: Cache for parsed filters and sort specs

    Returns:
        The filtered (if a filter is given) and ordered images. When the
        filter has its own ``| sort`` stage, the gallery sort is skipped;
        otherwise the gallery sort runs before any ``| limit``.

    Raises:
        FilterError: On parse, evaluation or sort configuration errors
    """
    cache = cache or _default_cache

    if filter_expr is None or not filter_expr.strip():
        spec = resolve_gallery_sort(sort_override, global_sort, cache)
        return sort_records(pool, spec)

    parsed = cache.query(filter_expr)
    try:
        matched = filter_records(parsed.predicate, pool, Evaluator())
    except FilterError as e:
        raise e.with_source(filter_expr)

    if not parsed.has_sort:
        spec = resolve_gallery_sort(sort_override, global_sort, cache)
        matched = sort_records(matched, spec)
    elif sort_override:
        logger.debug(
            "Filter '%s' has its own sort; ignoring gallery sort '%s'",
            filter_expr,
            sort_override,
        )

    try:
        return apply_pipeline(parsed.stages, matched)
    except FilterError as e:
        raise e.with_source(filter_expr)


def validate_filter(filter_expr: str) -> bool:
    """Check that a filter parses.

    Raises:
        LexError: For malformed tokens
        ParseError: For grammar violations
    """
    parse(filter_expr)
    return True


def try_validate_filter(filter_expr: str) -> tuple[bool, str | None]:
    """Check that a filter parses, returning the rendered error if not."""
    try:
        parse(filter_expr)
    except FilterError as e:
        return False, e.detail()
    return True, None
