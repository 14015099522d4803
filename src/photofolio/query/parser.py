"""Parser for the photofolio filter language.

Converts a stream of tokens into a FilterQuery: a predicate AST plus the
pipe stages written after it. Uses recursive descent parsing with operator
precedence.

Operator Precedence (lowest to highest):
1. or
2. and
3. not
4. == != < <= > >= (non-associative)
5. literals, property paths, function calls, ( ... )

Query grammar:

    query  → ( "all" | or_expr ) ( "|" stage )*
    stage  → "sort" path ( "asc" | "desc" )? | "limit" INTEGER
"""

from dataclasses import dataclass, field

from photofolio.core.types import SortDirection
from photofolio.query.errors import FilterError, ParseError, UnknownPropertyError
from photofolio.query.functions import FunctionRegistry
from photofolio.query.lexer import Lexer, Token, TokenType
from photofolio.query.properties import is_known_root
from photofolio.query.values import NULL, Value


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ASTNode:
    """Base class for AST nodes.

    Nodes are immutable and may be shared across threads. ``position`` is
    the source offset of the node and does not take part in equality, so
    ``a or b`` and ``(a) or (b)`` compare equal.
    """

    position: int = field(default=0, compare=False, kw_only=True)


@dataclass(frozen=True)
class Literal(ASTNode):
    """A literal value (string, number, boolean, null)."""
    value: Value


@dataclass(frozen=True)
class PropertyRef(ASTNode):
    """A property path (e.g. filename, exif.iso, exif.raw.Rating)."""
    path: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """Function call (e.g. year(dateTaken), contains(filename, 'x'))."""
    name: str
    arguments: tuple[ASTNode, ...]


@dataclass(frozen=True)
class UnaryNot(ASTNode):
    """Logical negation (not x)."""
    operand: ASTNode


@dataclass(frozen=True)
class BinaryCompare(ASTNode):
    """Comparison (==, !=, <, <=, >, >=)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class BinaryLogical(ASTNode):
    """Logical conjunction or disjunction (and, or)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class AllMarker(ASTNode):
    """The ``all`` keyword: a predicate that is always true."""


# -----------------------------------------------------------------------------
# Pipe stages and the parsed query
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SortStage:
    """``| sort <path> [asc|desc]``"""
    path: tuple[str, ...]
    direction: SortDirection = SortDirection.ASC
    position: int = field(default=0, compare=False)

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class LimitStage:
    """``| limit <n>``"""
    count: int
    position: int = field(default=0, compare=False)


PipeStage = SortStage | LimitStage


@dataclass(frozen=True)
class FilterQuery:
    """A complete parsed filter: predicate plus pipe stages.

    Attributes:
        source: The original filter string
        predicate: Predicate AST (AllMarker for ``all``)
        stages: Pipe stages in written order
    """

    source: str
    predicate: ASTNode
    stages: tuple[PipeStage, ...] = ()

    @property
    def selects_all(self) -> bool:
        return isinstance(self.predicate, AllMarker)

    @property
    def has_sort(self) -> bool:
        return any(isinstance(s, SortStage) for s in self.stages)

    @property
    def has_limit(self) -> bool:
        return any(isinstance(s, LimitStage) for s in self.stages)


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------

COMPARISON_OPS = {
    TokenType.EQ: "==",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.LTE: "<=",
    TokenType.GT: ">",
    TokenType.GTE: ">=",
}


class Parser:
    """Recursive descent parser for the filter language.

    Usage:
        parser = Parser("exif.iso >= 3200 | sort dateTaken desc | limit 5")
        query = parser.parse()
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = Lexer(source).tokenize()
        self.position = 0

    def parse(self) -> FilterQuery:
        """Parse the filter and return the query."""
        if self._is_at_end():
            raise self._error("Empty filter expression", self._current())

        predicate = self._parse_or()
        stages = self._parse_stages()

        if not self._is_at_end():
            raise self._error(
                f"Unexpected token '{self._current()}'", self._current()
            )

        return FilterQuery(self.source, predicate, tuple(stages))

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self._current().type in types

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume a token of the expected type, or raise error."""
        if self._current().type == token_type:
            return self._advance()
        raise self._error(message, self._current())

    def _error(self, message: str, token: Token) -> ParseError:
        return ParseError(message, token.position, self.source, token.length)

    # -------------------------------------------------------------------------
    # Predicate (in order of precedence, lowest to highest)
    # -------------------------------------------------------------------------

    def _parse_or(self) -> ASTNode:
        """Parse OR expression (lowest precedence)."""
        left = self._parse_and()

        while self._match(TokenType.OR):
            op = self._advance()
            right = self._parse_and()
            left = BinaryLogical("or", left, right, position=op.position)

        return left

    def _parse_and(self) -> ASTNode:
        """Parse AND expression."""
        left = self._parse_unary()

        while self._match(TokenType.AND):
            op = self._advance()
            right = self._parse_unary()
            left = BinaryLogical("and", left, right, position=op.position)

        return left

    def _parse_unary(self) -> ASTNode:
        """Parse NOT expression."""
        if self._match(TokenType.NOT):
            op = self._advance()
            operand = self._parse_unary()
            return UnaryNot(operand, position=op.position)

        return self._parse_comparison()

    def _parse_comparison(self) -> ASTNode:
        """Parse a single (non-chained) comparison."""
        left = self._parse_primary()

        if self._current().type not in COMPARISON_OPS:
            return left

        op = self._advance()
        right = self._parse_primary()

        if self._current().type in COMPARISON_OPS:
            raise self._error(
                "Comparison operators cannot be chained; use 'and'",
                self._current(),
            )

        return BinaryCompare(
            COMPARISON_OPS[op.type], left, right, position=op.position
        )

    def _parse_primary(self) -> ASTNode:
        """Parse primary expression (literals, paths, calls, groups)."""
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Literal(Value.number(token.value), position=token.position)

        if token.type == TokenType.STRING:
            self._advance()
            return Literal(Value.string(token.value), position=token.position)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return Literal(Value.boolean(token.value), position=token.position)

        if token.type == TokenType.NULL:
            self._advance()
            return Literal(NULL, position=token.position)

        if token.type == TokenType.ALL:
            self._advance()
            return AllMarker(position=token.position)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._match(TokenType.LPAREN):
                return self._parse_function_call(token)
            return self._parse_property(token)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_or()
            self._consume(TokenType.RPAREN, "Expected ')' after expression")
            return expr

        if token.type == TokenType.EOF:
            raise self._error("Unexpected end of expression", token)

        raise self._error(f"Unexpected token '{token}'", token)

    def _parse_property(self, token: Token) -> PropertyRef:
        path = tuple(str(token.value).split("."))
        if not is_known_root(path[0]):
            raise UnknownPropertyError(path[0], token.position, self.source)
        return PropertyRef(path, position=token.position)

    def _parse_function_call(self, name_token: Token) -> FunctionCall:
        """Parse a function call; the name must be in the fixed table."""
        name = str(name_token.value)
        if "." in name or not FunctionRegistry.is_registered(name):
            raise ParseError(
                f"Unknown function '{name}'",
                name_token.position,
                self.source,
                name_token.length,
            )

        self._consume(TokenType.LPAREN, "Expected '(' after function name")

        arguments: list[ASTNode] = []

        if not self._match(TokenType.RPAREN):
            arguments.append(self._parse_or())

            while self._match(TokenType.COMMA):
                self._advance()
                arguments.append(self._parse_or())

        self._consume(TokenType.RPAREN, f"Expected ')' after arguments to '{name}'")

        func_def = FunctionRegistry.get(name)
        expected = len(func_def.parameters)
        if len(arguments) != expected:
            plural = "argument" if expected == 1 else "arguments"
            raise ParseError(
                f"'{func_def.name}' function requires exactly {expected} {plural}",
                name_token.position,
                self.source,
                name_token.length,
            )

        return FunctionCall(
            func_def.name, tuple(arguments), position=name_token.position
        )

    # -------------------------------------------------------------------------
    # Pipe stages
    # -------------------------------------------------------------------------

    def _parse_stages(self) -> list[PipeStage]:
        stages: list[PipeStage] = []

        while self._match(TokenType.PIPE):
            self._advance()

            if self._match(TokenType.SORT):
                stages.append(self._parse_sort_stage())
            elif self._match(TokenType.LIMIT):
                stages.append(self._parse_limit_stage())
            else:
                raise self._error(
                    "Expected 'sort' or 'limit' after '|'", self._current()
                )

        return stages

    def _parse_sort_stage(self) -> SortStage:
        keyword = self._advance()
        token = self._consume(
            TokenType.IDENTIFIER, "Expected property name after 'sort'"
        )
        prop = self._parse_property(token)

        direction = SortDirection.ASC
        if self._match(TokenType.DESC):
            self._advance()
            direction = SortDirection.DESC
        elif self._match(TokenType.ASC):
            self._advance()

        return SortStage(prop.path, direction, keyword.position)

    def _parse_limit_stage(self) -> LimitStage:
        keyword = self._advance()
        token = self._current()

        if token.type != TokenType.NUMBER:
            raise self._error("Expected number after 'limit'", token)
        if not isinstance(token.value, int):
            raise self._error("Limit must be a whole number", token)
        if token.value < 0:
            raise self._error("Limit must not be negative", token)

        self._advance()
        return LimitStage(token.value, keyword.position)


def parse(source: str) -> FilterQuery:
    """Convenience function to parse a filter string.

    Args:
        source: The filter string

    Returns:
        The parsed query

    Raises:
        LexError: For malformed tokens
        ParseError: For grammar violations
    """
    try:
        return Parser(source).parse()
    except FilterError as exc:
        raise exc.with_source(source)


def parse_predicate(source: str) -> ASTNode:
    """Parse a filter that must not contain pipe stages."""
    query = parse(source)
    if query.stages:
        first = query.stages[0]
        raise ParseError(
            "Pipe stages are not allowed here", first.position, source
        )
    return query.predicate

