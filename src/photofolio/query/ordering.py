"""Deterministic ordering of image records by a property path.

Used by ``| sort`` pipe stages and by gallery sort resolution. The order is
total and independent of input order:

1. Each record is keyed by its value at ``path``, or at ``fallback`` when the
   primary value is NULL.
2. Records keyed by ``path`` come first, then records keyed by
   ``fallback``, then records without any key, whatever the direction.
3. Within each group keys are compared in the requested direction. Raw
   EXIF strings that parse as numbers sort as numbers; keys of different
   kinds are ranked number < datetime < string < boolean.
4. Ties are broken by filename ascending (ordinal), then source path.
"""

from collections.abc import Iterable, Sequence
from functools import cmp_to_key

from photofolio.core.types import SortDirection
from photofolio.models import ImageRecord
from photofolio.query.comparison import compare_values
from photofolio.query.properties import resolve, validate_path
from photofolio.query.values import Value, ValueKind, parse_number

_KIND_RANK = {
    ValueKind.NUMBER: 0,
    ValueKind.DATETIME: 1,
    ValueKind.STRING: 2,
    ValueKind.BOOLEAN: 3,
}

# Key groups, in output order
PRIMARY = 0
FALLBACK = 1
MISSING = 2


def _sortable(value: Value) -> Value:
    """Turn a raw EXIF string into a number when it looks like one."""
    if not value.raw:
        return value
    number = parse_number(value.data)
    if not number.is_null:
        return number
    return Value.string(value.data)


def sort_key(
    record: ImageRecord,
    path: Sequence[str],
    fallback: Sequence[str] | None = None,
) -> tuple[int, Value]:
    """Resolve the group and value a record is ordered by.

    The group is ``PRIMARY`` when the value came from ``path``, ``FALLBACK``
    when it came from ``fallback`` and ``MISSING`` when neither resolved.
    """
    value = _sortable(resolve(path, record))
    if not value.is_null:
        return PRIMARY, value
    if fallback:
        value = _sortable(resolve(fallback, record))
        if not value.is_null:
            return FALLBACK, value
    return MISSING, value


def compare_keys(left: Value, right: Value) -> int:
    """Order two non-NULL sort keys of possibly different kinds."""
    if left.kind is not right.kind:
        return -1 if _KIND_RANK[left.kind] < _KIND_RANK[right.kind] else 1
    if left.kind is ValueKind.BOOLEAN:
        return int(left.data) - int(right.data)
    if left.kind is ValueKind.STRING:
        return _ordinal(left.data, right.data)
    return compare_values(left, right)


def _ordinal(a: str, b: str) -> int:
    return (a > b) - (a < b)


def sort_records(
    records: Iterable[ImageRecord],
    path: Sequence[str],
    direction: SortDirection = SortDirection.ASC,
    fallback: Sequence[str] | None = None,
) -> list[ImageRecord]:
    """Return ``records`` ordered by ``path`` (see module docstring).

    Raises:
        EvaluationError: If ``path`` or ``fallback`` is not a valid property
    """
    validate_path(path)
    if fallback:
        validate_path(fallback)

    keyed = [(sort_key(r, path, fallback), r) for r in records]

    def compare(
        a: tuple[tuple[int, Value], ImageRecord],
        b: tuple[tuple[int, Value], ImageRecord],
    ) -> int:
        (group_a, key_a), rec_a = a
        (group_b, key_b), rec_b = b

        if group_a != group_b:
            return group_a - group_b

        if group_a != MISSING:
            order = compare_keys(key_a, key_b)
            if direction.descending:
                order = -order
            if order:
                return order

        return _ordinal(rec_a.filename, rec_b.filename) or _ordinal(
            rec_a.source_path, rec_b.source_path
        )

    keyed.sort(key=cmp_to_key(compare))
    return [record for _, record in keyed]
