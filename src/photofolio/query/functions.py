"""Function registry for the photofolio filter language.

Functions are callable from filter expressions (e.g. ``year(dateTaken) ==
2024``). The table is fixed: it is filled from ``builtins`` when the query
package is imported and is not extended by user configuration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from photofolio.query.values import Value, ValueKind


class FunctionCategory(Enum):
    """Categories for organizing functions in documentation."""

    STRING = "string"
    DATE = "date"


@dataclass(frozen=True)
class FunctionParameter:
    """Definition of a function parameter.

    Attributes:
        name: Parameter name
        kind: Expected value kind (NULL is always accepted)
        description: Human-readable description
    """

    name: str
    kind: ValueKind
    description: str


@dataclass(frozen=True)
class FunctionDefinition:
    """Complete definition of a filter function.

    Attributes:
        name: Function name as used in expressions (lower case)
        description: Human-readable description
        category: Category for documentation organization
        parameters: Parameter definitions, in call order
        return_kind: Kind of the return value
        examples: Example expressions using this function
        implementation: Callable taking and returning ``Value`` instances
    """

    name: str
    description: str
    category: FunctionCategory
    parameters: tuple[FunctionParameter, ...]
    return_kind: ValueKind
    implementation: Callable[..., Value]
    examples: tuple[str, ...] = ()

    @property
    def signature(self) -> str:
        params = ", ".join(f"{p.name}: {p.kind.value}" for p in self.parameters)
        return f"{self.name}({params}) -> {self.return_kind.value}"

    def to_dict(self) -> dict[str, Any]:
        """Export for documentation output."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.kind.value,
                    "description": p.description,
                }
                for p in self.parameters
            ],
            "returnType": self.return_kind.value,
            "examples": list(self.examples),
        }


class FunctionRegistry:
    """Registry for filter functions.

    Lookups are case-insensitive; names are stored lower case.

    Example:
        func = FunctionRegistry.get("year")
        result = func.implementation(Value.date_time(taken))
    """

    _functions: dict[str, FunctionDefinition] = {}

    @classmethod
    def register(cls, func_def: FunctionDefinition) -> None:
        """Register a function definition."""
        cls._functions[func_def.name.lower()] = func_def

    @classmethod
    def get(cls, name: str) -> FunctionDefinition:
        """Get a function definition by name.

        Raises:
            ValueError: If function is not registered
        """
        key = name.lower()
        if key not in cls._functions:
            raise ValueError(f"Unknown function: {name}")
        return cls._functions[key]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a function is registered."""
        return name.lower() in cls._functions

    @classmethod
    def list_all(cls) -> list[FunctionDefinition]:
        """List all registered functions."""
        return list(cls._functions.values())

    @classmethod
    def list_by_category(cls, category: FunctionCategory) -> list[FunctionDefinition]:
        """List functions in a specific category."""
        return [f for f in cls._functions.values() if f.category == category]

    @classmethod
    def export_documentation(cls) -> dict[str, Any]:
        """Export the full table, organized by category."""
        by_category: dict[str, list[dict[str, Any]]] = {}
        for func_def in cls._functions.values():
            by_category.setdefault(func_def.category.value, []).append(
                func_def.to_dict()
            )

        return {
            "functions": {name: f.to_dict() for name, f in cls._functions.items()},
            "byCategory": by_category,
        }

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._functions.clear()
