"""
Declarative JSON view templates.

Evaluates a JSON template containing $for/$if control nodes and
{{path | filter: arg}} placeholders against a data model, producing a
component tree for a widget renderer.

Basic usage:
    >>> from adaptive import TemplateEngine
    >>> engine = TemplateEngine('{"title": "{{feed.title | upcase}}"}')
    >>> engine.evaluate({"feed": {"title": "news"}})
    '{"title":"NEWS"}'
"""

from .config import ConfigLoader, DataLoader, EvaluationLimits
from .rendering import NodeRenderer, TemplateEngine, TemplateParseError, ViewRenderer
from .template import EvaluationContext, ExpressionEvaluator, TemplateFilters, is_truthy
from .tree import detach

__version__ = "1.0.0"

__all__ = [
    "TemplateEngine",
    "TemplateParseError",
    "NodeRenderer",
    "ViewRenderer",
    "EvaluationContext",
    "ExpressionEvaluator",
    "TemplateFilters",
    "is_truthy",
    "detach",
    "EvaluationLimits",
    "ConfigLoader",
    "DataLoader",
]
