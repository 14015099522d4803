"""Comparison semantics shared by predicates and sorting.

``==`` and ``!=`` accept two values of the same kind, or any value against
NULL. Ordering operators require two numbers or two datetimes and are
false whenever either side is NULL. Raw EXIF strings are coerced to the
kind of the other operand before comparing, and to numbers when both sides
are raw.
"""

from datetime import datetime, timezone

from photofolio.query.errors import EvaluationError
from photofolio.query.values import FALSE, NULL, TRUE, Value, ValueKind, parse_number

ORDERING_OPS = ("<", "<=", ">", ">=")
EQUALITY_OPS = ("==", "!=")

_TRUE_STRINGS = ("true", "yes")
_FALSE_STRINGS = ("false", "no")


def coerce_raw(value: Value, target: ValueKind) -> Value:
    """Coerce a raw EXIF string toward ``target``.

    Unparsable values become NULL so that a stray tag never aborts a build.
    Non-raw values are returned unchanged.
    """
    if not value.raw:
        return value
    if target is ValueKind.NUMBER:
        return parse_number(value.data)
    if target is ValueKind.BOOLEAN:
        lowered = value.data.strip().lower()
        if lowered in _TRUE_STRINGS:
            return TRUE
        if lowered in _FALSE_STRINGS:
            return FALSE
        number = parse_number(value.data)
        if number.is_null:
            return NULL
        return Value.boolean(number.data != 0)
    return value


def normalize_datetime(value: datetime) -> datetime:
    """Make aware and naive datetimes comparable (aware → naive UTC)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def unify(left: Value, right: Value) -> tuple[Value, Value]:
    """Coerce a raw operand to the kind of the other operand."""
    if left.raw and not right.raw:
        left = coerce_raw(left, right.kind)
    elif right.raw and not left.raw:
        right = coerce_raw(right, left.kind)
    return left, right


def compare(
    operator: str,
    left: Value,
    right: Value,
    position: int | None = None,
) -> bool:
    """Apply a comparison operator to two values.

    Raises:
        EvaluationError: On a type mismatch or unknown operator
    """
    left, right = unify(left, right)

    if operator in EQUALITY_OPS:
        equal = _equals(left, right, operator, position)
        return equal if operator == "==" else not equal

    if operator not in ORDERING_OPS:
        raise EvaluationError(f"Unknown operator: {operator}", position)

    if left.raw and right.raw:
        left, right = parse_number(left.data), parse_number(right.data)

    if left.is_null or right.is_null:
        return False

    order = compare_values(left, right, operator, position)
    if operator == "<":
        return order < 0
    if operator == "<=":
        return order <= 0
    if operator == ">":
        return order > 0
    return order >= 0


def _equals(left: Value, right: Value, operator: str, position: int | None) -> bool:
    if left.is_null or right.is_null:
        return left.is_null and right.is_null

    if left.kind is not right.kind:
        raise EvaluationError(
            f"Cannot compare {left.describe()} {operator} {right.describe()}",
            position,
        )

    if left.kind is ValueKind.DATETIME:
        return normalize_datetime(left.data) == normalize_datetime(right.data)

    return left.data == right.data


def compare_values(
    left: Value,
    right: Value,
    operator: str = "<",
    position: int | None = None,
) -> int:
    """Order two non-NULL numbers or datetimes, returning -1, 0 or 1.

    Raises:
        EvaluationError: For any other combination of kinds
    """
    if left.kind is not right.kind or left.kind not in (
        ValueKind.NUMBER,
        ValueKind.DATETIME,
    ):
        raise EvaluationError(
            f"Cannot compare {left.describe()} {operator} {right.describe()}",
            position,
        )

    a, b = left.data, right.data
    if left.kind is ValueKind.DATETIME:
        a, b = normalize_datetime(a), normalize_datetime(b)

    if a < b:
        return -1
    if a > b:
        return 1
    return 0
