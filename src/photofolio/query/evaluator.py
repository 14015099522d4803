"""Evaluator for the photofolio filter language.

Walks the predicate AST against one image record at a time, and runs pipe
stages over the filtered sequence. The evaluator holds no per-record state,
so a single instance (and a single AST) may be used from several threads.
"""

from collections.abc import Iterable, Sequence

from photofolio.models import ImageRecord
from photofolio.query.comparison import coerce_raw, compare
from photofolio.query.errors import EvaluationError
from photofolio.query.functions import FunctionRegistry
from photofolio.query.ordering import sort_records
from photofolio.query.parser import (
    AllMarker,
    ASTNode,
    BinaryCompare,
    BinaryLogical,
    FunctionCall,
    LimitStage,
    Literal,
    PipeStage,
    PropertyRef,
    SortStage,
    UnaryNot,
)
from photofolio.query.properties import resolve, validate_path
from photofolio.query.values import FALSE, TRUE, Value, ValueKind


class Evaluator:
    """Evaluates predicate ASTs against image records.

    Usage:
        evaluator = Evaluator()
        matched = evaluator.evaluate_predicate(query.predicate, record)
    """

    def evaluate(self, node: ASTNode, record: ImageRecord) -> Value:
        """Evaluate an AST node and return the resulting value."""
        method_name = f"_eval_{type(node).__name__.lower()}"
        method = getattr(self, method_name, None)

        if method is None:
            raise EvaluationError(f"Unknown node type: {type(node).__name__}")

        return method(node, record)

    def evaluate_predicate(self, node: ASTNode, record: ImageRecord) -> bool:
        """Evaluate a predicate; NULL counts as false.

        Raises:
            EvaluationError: If the predicate does not produce a boolean
        """
        result = self.evaluate(node, record)
        return self._to_bool(result, node, "Filter expression")

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_allmarker(self, node: AllMarker, record: ImageRecord) -> Value:
        return TRUE

    def _eval_literal(self, node: Literal, record: ImageRecord) -> Value:
        return node.value

    def _eval_propertyref(self, node: PropertyRef, record: ImageRecord) -> Value:
        return resolve(node.path, record, node.position)

    def _eval_unarynot(self, node: UnaryNot, record: ImageRecord) -> Value:
        operand = self.evaluate(node.operand, record)
        return FALSE if self._to_bool(operand, node.operand, "'not'") else TRUE

    def _eval_binarylogical(self, node: BinaryLogical, record: ImageRecord) -> Value:
        if node.operator not in ("and", "or"):
            raise EvaluationError(
                f"Unknown logical operator: {node.operator}", node.position
            )

        context = f"'{node.operator}'"
        left = self._to_bool(self.evaluate(node.left, record), node.left, context)

        # Short-circuit: the right operand is only evaluated when needed
        if node.operator == "and" and not left:
            return FALSE
        if node.operator == "or" and left:
            return TRUE

        right = self._to_bool(self.evaluate(node.right, record), node.right, context)
        return TRUE if right else FALSE

    def _eval_binarycompare(self, node: BinaryCompare, record: ImageRecord) -> Value:
        left = self.evaluate(node.left, record)
        right = self.evaluate(node.right, record)
        return Value.boolean(compare(node.operator, left, right, node.position))

    def _eval_functioncall(self, node: FunctionCall, record: ImageRecord) -> Value:
        if not FunctionRegistry.is_registered(node.name):
            raise EvaluationError(f"Unknown function '{node.name}'", node.position)

        func_def = FunctionRegistry.get(node.name)

        if len(node.arguments) != len(func_def.parameters):
            raise EvaluationError(
                f"'{func_def.name}' function requires exactly "
                f"{len(func_def.parameters)} argument(s), got {len(node.arguments)}",
                node.position,
            )

        args = [self.evaluate(arg, record) for arg in node.arguments]

        try:
            return func_def.implementation(*args)
        except EvaluationError as e:
            raise EvaluationError(e.message, node.position) from e

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _to_bool(self, value: Value, node: ASTNode, context: str) -> bool:
        """Interpret a value as a condition; NULL and unparsable raw are false."""
        if value.is_null:
            return False
        if value.kind is ValueKind.BOOLEAN:
            return value.data
        if value.raw:
            coerced = coerce_raw(value, ValueKind.BOOLEAN)
            return bool(coerced.data) if not coerced.is_null else False
        raise EvaluationError(
            f"{context} requires a boolean, got {value.describe()}", node.position
        )


# -----------------------------------------------------------------------------
# Filtering and pipe stages
# -----------------------------------------------------------------------------


def filter_records(
    predicate: ASTNode,
    pool: Iterable[ImageRecord],
    evaluator: Evaluator | None = None,
) -> list[ImageRecord]:
    """Return the records for which ``predicate`` is true, in pool order.

    An evaluation error for any record aborts the whole filter: a typo must
    fail the build rather than silently shrink a gallery.
    """
    evaluator = evaluator or Evaluator()
    if isinstance(predicate, AllMarker):
        return list(pool)
    return [r for r in pool if evaluator.evaluate_predicate(predicate, r)]


def apply_pipeline(
    stages: Sequence[PipeStage],
    records: Sequence[ImageRecord],
) -> list[ImageRecord]:
    """Run pipe stages strictly left to right.

    ``sort`` orders by the stage's path with filename as tie-break;
    ``limit n`` keeps the first ``n`` records (fewer is fine, zero is empty).
    """
    result = list(records)
    for stage in stages:
        if isinstance(stage, SortStage):
            validate_path(stage.path, stage.position)
            result = sort_records(result, stage.path, stage.direction)
        elif isinstance(stage, LimitStage):
            if stage.count < 0:
                raise EvaluationError(
                    f"Limit must not be negative, got {stage.count}", stage.position
                )
            result = result[: stage.count]
        else:
            raise EvaluationError(f"Unknown pipe stage: {type(stage).__name__}")
    return result
