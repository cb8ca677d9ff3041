"""Template node and view rendering modules."""

from .nodes import NodeKind, classify
from .node_renderer import NodeRenderer
from .template_engine import TemplateEngine, TemplateParseError
from .view_renderer import ViewRenderer

__all__ = [
    "NodeKind",
    "classify",
    "NodeRenderer",
    "TemplateEngine",
    "TemplateParseError",
    "ViewRenderer",
]
