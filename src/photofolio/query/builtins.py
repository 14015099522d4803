"""Built-in functions for the photofolio filter language.

This module registers the fixed function table with the FunctionRegistry.
The query package calls ``register_all_builtins()`` on import.

Categories:
- Date: year, month, day
- String: contains, starts_with, ends_with, lower, upper

String functions are ordinal: comparisons are case-sensitive and case
conversion does not depend on the platform locale.
"""

from photofolio.query.errors import EvaluationError
from photofolio.query.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from photofolio.query.values import FALSE, NULL, Value, ValueKind


def register_all_builtins() -> None:
    """Register all built-in functions with the FunctionRegistry."""
    _register_date_functions()
    _register_string_functions()


def _expect(function: str, argument: int, value: Value, kind: ValueKind) -> None:
    """Raise unless ``value`` is of ``kind`` or NULL."""
    if value.is_null or value.kind is kind:
        return
    raise EvaluationError(
        f"Function '{function}' expects a {kind.value} as argument {argument}, "
        f"got {value.describe()}"
    )


# -----------------------------------------------------------------------------
# Date Functions
# -----------------------------------------------------------------------------


_EXAMPLE_PARTS = {"year": 2024, "month": 6, "day": 21}


def _date_part(function: str, attribute: str):
    def implementation(value: Value) -> Value:
        _expect(function, 1, value, ValueKind.DATETIME)
        if value.is_null:
            return NULL
        return Value.number(getattr(value.data, attribute))

    return implementation


def _register_date_functions() -> None:
    for name, attribute, description in (
        ("year", "year", "Returns the year of a date"),
        ("month", "month", "Returns the month (1-12) of a date"),
        ("day", "day", "Returns the day of the month (1-31) of a date"),
    ):
        FunctionRegistry.register(
            FunctionDefinition(
                name=name,
                description=description,
                category=FunctionCategory.DATE,
                parameters=(
                    FunctionParameter("date", ValueKind.DATETIME, "The date to read"),
                ),
                return_kind=ValueKind.NUMBER,
                implementation=_date_part(name, attribute),
                examples=(f"{name}(dateTaken) == {_EXAMPLE_PARTS[name]}",),
            )
        )


# -----------------------------------------------------------------------------
# String Functions
# -----------------------------------------------------------------------------


def _string_test(function: str, test):
    def implementation(value: Value, needle: Value) -> Value:
        _expect(function, 1, value, ValueKind.STRING)
        _expect(function, 2, needle, ValueKind.STRING)
        if value.is_null or needle.is_null:
            return FALSE
        return Value.boolean(test(value.data, needle.data))

    return implementation


def _case_conversion(function: str, convert):
    def implementation(value: Value) -> Value:
        _expect(function, 1, value, ValueKind.STRING)
        if value.is_null:
            return NULL
        return Value(ValueKind.STRING, convert(value.data), raw=value.raw)

    return implementation


def _register_string_functions() -> None:
    for name, test, description, example in (
        (
            "contains",
            lambda s, sub: sub in s,
            "Tests whether a string contains a substring",
            "contains(filename, 'portrait')",
        ),
        (
            "starts_with",
            lambda s, prefix: s.startswith(prefix),
            "Tests whether a string starts with a prefix",
            "starts_with(exif.model, 'EOS')",
        ),
        (
            "ends_with",
            lambda s, suffix: s.endswith(suffix),
            "Tests whether a string ends with a suffix",
            "ends_with(filename, '.jpg')",
        ),
    ):
        FunctionRegistry.register(
            FunctionDefinition(
                name=name,
                description=description,
                category=FunctionCategory.STRING,
                parameters=(
                    FunctionParameter("value", ValueKind.STRING, "The string to test"),
                    FunctionParameter("search", ValueKind.STRING, "The text to look for"),
                ),
                return_kind=ValueKind.BOOLEAN,
                implementation=_string_test(name, test),
                examples=(example,),
            )
        )

    for name, convert, description, example in (
        ("lower", str.lower, "Converts a string to lowercase", "lower(exif.make) == 'canon'"),
        ("upper", str.upper, "Converts a string to uppercase", "upper(exif.make) == 'SONY'"),
    ):
        FunctionRegistry.register(
            FunctionDefinition(
                name=name,
                description=description,
                category=FunctionCategory.STRING,
                parameters=(
                    FunctionParameter("value", ValueKind.STRING, "The string to convert"),
                ),
                return_kind=ValueKind.STRING,
                implementation=_case_conversion(name, convert),
                examples=(example,),
            )
        )
