"""Typed values for the filter language.

Literals and resolved image properties are both represented as ``Value``
instances so that comparison and function semantics can be defined once,
independent of where a value came from.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Kinds of values the evaluator understands."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    NULL = "null"


@dataclass(frozen=True)
class Value:
    """A tagged value.

    Attributes:
        kind: The value kind
        data: The Python payload (str, float, bool, datetime or None)
        raw: True for untyped strings read from the raw EXIF dictionary,
            which are coerced to numbers or booleans at comparison time
    """

    kind: ValueKind
    data: Any = None
    raw: bool = field(default=False, compare=False)

    @classmethod
    def string(cls, data: str) -> "Value":
        return cls(ValueKind.STRING, data)

    @classmethod
    def number(cls, data: int | float) -> "Value":
        return cls(ValueKind.NUMBER, float(data))

    @classmethod
    def boolean(cls, data: bool) -> "Value":
        return cls(ValueKind.BOOLEAN, bool(data))

    @classmethod
    def date_time(cls, data: datetime) -> "Value":
        return cls(ValueKind.DATETIME, data)

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """Wrap a plain Python object, mapping None to NULL."""
        if obj is None:
            return NULL
        if isinstance(obj, Value):
            return obj
        # bool before int: bool is an int subclass
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, datetime):
            return cls.date_time(obj)
        if isinstance(obj, date):
            return cls.date_time(datetime.combine(obj, time.min))
        raise TypeError(f"Cannot convert {type(obj).__name__} to a filter value")

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def describe(self) -> str:
        """Short description used in error messages."""
        if self.kind is ValueKind.NULL:
            return "null"
        if self.kind is ValueKind.STRING:
            return f"string '{self.data}'"
        if self.kind is ValueKind.NUMBER:
            return f"number {self.data:g}"
        if self.kind is ValueKind.BOOLEAN:
            return "boolean " + ("true" if self.data else "false")
        return f"datetime {self.data.isoformat()}"


NULL = Value(ValueKind.NULL)
TRUE = Value(ValueKind.BOOLEAN, True)
FALSE = Value(ValueKind.BOOLEAN, False)


def parse_number(text: str) -> Value:
    """Coerce a raw EXIF string to a NUMBER, or NULL if it is not numeric."""
    stripped = text.strip()
    if not stripped:
        return NULL
    try:
        number = float(stripped)
    except ValueError:
        return NULL
    # nan/inf spellings are not meaningful ratings or measurements
    if number != number or number in (float("inf"), float("-inf")):
        return NULL
    return Value.number(number)
