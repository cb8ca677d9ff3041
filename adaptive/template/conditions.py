"""
Condition evaluation for template logic.

A condition is a path with an optional filter chain, e.g. ``user.is_admin``
or ``items | size``, judged by the shared truthiness rule.
"""

from typing import Any

from .context import EvaluationContext
from .expressions import ExpressionEvaluator, OPEN
from .filters import is_truthy


class ConditionEvaluator:
    """Evaluates $if conditions and $in collection paths."""

    def __init__(self, expr_evaluator: ExpressionEvaluator):
        self.expr_evaluator = expr_evaluator

    def evaluate_value(self, path: str, ctx: EvaluationContext) -> Any:
        """
        Resolve a control-node path to its value.

        Accepts a bare expression ("feed.items | first") or a placeholder
        string ("{{feed.items}}").
        """
        if OPEN in path:
            return self.expr_evaluator.evaluate_string(path, ctx)
        return self.expr_evaluator.evaluate_expression(path, ctx)

    def evaluate_condition(self, path: str, ctx: EvaluationContext) -> bool:
        """
        Evaluate a condition path.

        Returns:
            True when the resolved value is truthy
        """
        return is_truthy(self.evaluate_value(path, ctx))
