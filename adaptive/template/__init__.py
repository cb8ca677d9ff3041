"""Template expression evaluation, filters and scoping."""

from .context import EvaluationContext
from .expressions import ExpressionEvaluator, parse_expression
from .filters import TemplateFilters, is_truthy, stringify
from .conditions import ConditionEvaluator

__all__ = [
    "EvaluationContext",
    "ExpressionEvaluator",
    "parse_expression",
    "TemplateFilters",
    "is_truthy",
    "stringify",
    "ConditionEvaluator",
]
