"""
View rendering from view template configurations.

Wraps each evaluated template as ``{"components": <tree>}``, the payload the
widget renderer consumes.
"""

import logging
from typing import Any, Dict, Optional

from ..config import ConfigLoader, EvaluationLimits
from ..template.filters import to_json
from .template_engine import DataModel, TemplateEngine

logger = logging.getLogger(__name__)


class ViewRenderer:
    """Renders named views, caching one template engine per view."""

    def __init__(self, config_loader: ConfigLoader, limits: Optional[EvaluationLimits] = None):
        self.config_loader = config_loader
        self.limits = limits or config_loader.load_limits()
        self._engines: Dict[str, TemplateEngine] = {}

    def get_engine(self, view_name: str) -> TemplateEngine:
        """
        Get the template engine for a view, parsing its template on first use.

        Raises:
            FileNotFoundError: If the view template does not exist
            TemplateParseError: If the view template is not valid JSON
        """
        engine = self._engines.get(view_name)
        if engine is None:
            template_text = self.config_loader.load_view_text(view_name)
            engine = TemplateEngine(template_text, self.limits)
            self._engines[view_name] = engine
            logger.info("Template engine initialized for view %s", view_name)
        return engine

    def invalidate(self, view_name: Optional[str] = None) -> None:
        """Drop cached engines so templates are re-read from disk."""
        if view_name is None:
            self._engines.clear()
        else:
            self._engines.pop(view_name, None)

    def render_view(self, view_name: str, data_model: DataModel = None) -> Dict[str, Any]:
        """
        Render a complete view.

        Args:
            view_name: Name of the view template
            data_model: Data model as JSON text or parsed object

        Returns:
            View response with the rendered component tree
        """
        tree = self.get_engine(view_name).evaluate_tree(data_model)
        return {"components": tree if tree is not None else {}}

    def render_view_json(self, view_name: str, data_model: DataModel = None) -> str:
        """Render a view and serialize the response as compact JSON."""
        return to_json(self.render_view(view_name, data_model))
