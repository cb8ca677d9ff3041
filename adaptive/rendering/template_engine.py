"""
JSON template engine.

Evaluates a declarative template against a data model, producing a component
tree for the view renderer. Supports $for loops, $if conditionals, and
{{expression | filter}} interpolation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import EvaluationLimits
from ..template import EvaluationContext
from ..template.filters import to_json
from ..tree import parse_json
from .node_renderer import NodeRenderer

logger = logging.getLogger(__name__)

DataModel = Union[str, bytes, bytearray, Dict[str, Any], None]


class TemplateParseError(ValueError):
    """Raised when a template is not valid JSON."""


class TemplateEngine:
    """
    Evaluates a parsed JSON template against data models.

    The template is parsed once and never modified, so one engine can serve
    any number of evaluations, including concurrent ones: every call builds
    its own context and output tree.

    Examples:
        >>> engine = TemplateEngine('{"type": "text", "value": "Hi {{name}}!"}')
        >>> engine.evaluate('{"name": "Ann"}')
        '{"type":"text","value":"Hi Ann!"}'
    """

    def __init__(
        self,
        template_json: Union[str, bytes, bytearray],
        limits: Optional[EvaluationLimits] = None,
        renderer: Optional[NodeRenderer] = None
    ):
        """
        Parse a template.

        Args:
            template_json: Template JSON text
            limits: Recursion and loop bounds for every evaluation
            renderer: Node renderer to use (a default one is created)

        Raises:
            TemplateParseError: If the text is not a valid JSON template
        """
        try:
            template = parse_json(template_json)
        except (ValueError, RecursionError) as e:
            raise TemplateParseError(f"Invalid template JSON: {e}") from e

        if template is None:
            raise TemplateParseError("Template parsed to null")

        self._template = template
        self.limits = limits or EvaluationLimits()
        self.renderer = renderer or NodeRenderer()

    @classmethod
    def from_file(cls, path: Union[str, Path], limits: Optional[EvaluationLimits] = None) -> "TemplateEngine":
        """Create an engine from a template file."""
        template_file = Path(path)
        if not template_file.exists():
            raise FileNotFoundError(f"Template not found: {path}")

        return cls(template_file.read_text(encoding="utf-8"), limits)

    def evaluate(self, data_model: DataModel = None) -> str:
        """
        Evaluate the template against a data model.

        Args:
            data_model: JSON text or an already-parsed object

        Returns:
            Compact JSON text of the component tree
        """
        result = self.evaluate_tree(data_model)
        return to_json(result if result is not None else {})

    def evaluate_tree(self, data_model: DataModel = None) -> Any:
        """Evaluate the template and return the output tree as Python values."""
        ctx = EvaluationContext(self._load_data(data_model), self.limits)
        return self.renderer.render(self._template, ctx)

    @staticmethod
    def _load_data(data_model: DataModel) -> Dict[str, Any]:
        if data_model is None:
            return {}

        if isinstance(data_model, (str, bytes, bytearray)):
            try:
                data_model = parse_json(data_model)
            except (ValueError, RecursionError) as e:
                logger.warning("Data model is not valid JSON, using empty model: %s", e)
                return {}

        if not isinstance(data_model, dict):
            logger.warning("Data model root must be an object, got %s; using empty model",
                           type(data_model).__name__)
            return {}

        return data_model
