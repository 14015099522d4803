"""Filter expression language for photofolio galleries.

This module provides:
- Lexer: Tokenizes filter strings
- Parser: Produces a FilterQuery (predicate AST plus pipe stages)
- Evaluator: Evaluates predicates against image records
- FunctionRegistry: The fixed table of filter functions
- QueryCache: Compute-once cache of parsed filters
"""

from photofolio.query.builtins import register_all_builtins
from photofolio.query.cache import QueryCache
from photofolio.query.errors import (
    ConfigurationError,
    EvaluationError,
    FilterError,
    LexError,
    ParseError,
    UnknownPropertyError,
)
from photofolio.query.evaluator import Evaluator, apply_pipeline, filter_records
from photofolio.query.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from photofolio.query.lexer import Lexer, Token, TokenType, tokenize
from photofolio.query.ordering import sort_records
from photofolio.query.parser import (
    AllMarker,
    ASTNode,
    BinaryCompare,
    BinaryLogical,
    FilterQuery,
    FunctionCall,
    LimitStage,
    Literal,
    Parser,
    PipeStage,
    PropertyRef,
    SortStage,
    UnaryNot,
    parse,
    parse_predicate,
)
from photofolio.query.properties import resolve, validate_path
from photofolio.query.values import NULL, Value, ValueKind

register_all_builtins()

__all__ = [
    # Errors
    "ConfigurationError",
    "EvaluationError",
    "FilterError",
    "LexError",
    "ParseError",
    "UnknownPropertyError",
    # Values and properties
    "NULL",
    "Value",
    "ValueKind",
    "resolve",
    "validate_path",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "AllMarker",
    "ASTNode",
    "BinaryCompare",
    "BinaryLogical",
    "FilterQuery",
    "FunctionCall",
    "LimitStage",
    "Literal",
    "Parser",
    "PipeStage",
    "PropertyRef",
    "SortStage",
    "UnaryNot",
    "parse",
    "parse_predicate",
    # Evaluator
    "Evaluator",
    "apply_pipeline",
    "filter_records",
    "sort_records",
    # Functions
    "FunctionCategory",
    "FunctionDefinition",
    "FunctionParameter",
    "FunctionRegistry",
    "register_all_builtins",
    # Cache
    "QueryCache",
]
