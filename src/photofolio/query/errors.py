"""Error types for the photofolio filter language.

All errors carry enough context (offset, source text, offending name) to be
rendered without re-parsing the expression:

    Filter parse error at position 13: Unknown property 'xyz'
    Expression: exif.make == xyz
                             ^^^
"""

_EXPRESSION_PREFIX = "Expression: "


class FilterError(Exception):
    """Base class for every error raised by the filter engine.

    Attributes:
        message: Human-readable description without location information
        position: 0-based offset into ``source``, or None if unknown
        source: The original expression string, if known
        length: Width of the offending span (used for caret rendering)
    """

    label = "Filter error"

    def __init__(
        self,
        message: str,
        position: int | None = None,
        source: str | None = None,
        length: int = 1,
    ):
        self.message = message
        self.position = position
        self.source = source
        self.length = max(length, 1)
        if position is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} at position {position}")

    def with_source(self, source: str) -> "FilterError":
        """Attach the expression text if the raiser did not know it."""
        if self.source is None:
            self.source = source
        return self

    def detail(self) -> str:
        """Render the error with a caret pointing at the offending span."""
        if self.position is None:
            header = f"{self.label}: {self.message}"
        else:
            header = f"{self.label} at position {self.position}: {self.message}"

        if not self.source:
            return header

        lines = [header, f"{_EXPRESSION_PREFIX}{self.source}"]
        if self.position is not None:
            pointer = " " * (len(_EXPRESSION_PREFIX) + self.position)
            lines.append(pointer + "^" * self.length)
        return "\n".join(lines)


class LexError(FilterError):
    """Malformed token: unterminated string or invalid character."""

    label = "Filter parse error"


class ParseError(FilterError):
    """Grammar violation: unexpected token, unbalanced parens, bad pipe stage."""

    label = "Filter parse error"


class EvaluationError(FilterError):
    """Type mismatch, unknown property or unknown function during evaluation."""

    label = "Filter evaluation error"


class UnknownPropertyError(ParseError, EvaluationError):
    """Reference to a property root that no image can ever have.

    Detected by the parser where possible, so it is both a parse error (it
    aborts building the gallery's query) and an evaluation error (it names
    a property the resolver cannot look up).
    """

    label = "Filter parse error"

    def __init__(
        self,
        name: str,
        position: int | None = None,
        source: str | None = None,
    ):
        self.name = name
        super().__init__(
            f"Unknown property '{name}'", position, source, length=len(name)
        )


class ConfigurationError(FilterError):
    """Unresolvable sort field or malformed sort configuration."""

    label = "Sort configuration error"
