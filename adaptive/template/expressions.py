"""
Template expression parsing and evaluation.

Handles ``{{path.to.value | filter: arg | filter2}}`` placeholders. A string
that is exactly one placeholder resolves to the native JSON value; text mixed
with placeholders always produces a string.
"""

from typing import Any, List, Optional, Tuple

from .context import EvaluationContext
from .filters import TemplateFilters, stringify
from ..tree import detach

OPEN = "{{"
CLOSE = "}}"

FilterCall = Tuple[str, Optional[str]]


def split_pipes(expr: str) -> List[str]:
    """
    Split an expression on '|', respecting quoted filter arguments.

    A quote only opens right after the ':' of a filter, so apostrophes in
    unquoted arguments ("default: Don't know") are plain text.

    Example: "items | join: ' | '" -> ["items", "join: ' | '"]
    """
    parts = []
    current = []
    quote_char = None

    for char in expr:
        if quote_char is None and char in ('"', "'") and ''.join(current).rstrip().endswith(':'):
            quote_char = char
        elif char == quote_char:
            quote_char = None
        elif char == '|' and quote_char is None:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(char)

    parts.append(''.join(current).strip())
    return parts


def unquote(arg: str) -> str:
    """Strip whitespace and one pair of matching surrounding quotes."""
    arg = arg.strip()
    if len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in ('"', "'"):
        return arg[1:-1]
    return arg


def parse_expression(expr: str) -> Tuple[str, List[FilterCall]]:
    """
    Parse "path.to.value | filter: arg | filter2" into a path and filter chain.

    Examples:
        >>> parse_expression("user.name | default: Anonymous | upcase")
        ('user.name', [('default', 'Anonymous'), ('upcase', None)])
    """
    parts = split_pipes(expr)
    path = parts[0]
    filters: List[FilterCall] = []

    for part in parts[1:]:
        name, sep, arg = part.partition(':')
        if sep:
            filters.append((name.strip(), unquote(arg)))
        else:
            filters.append((name.strip(), None))

    return path, filters


def is_pure_expression(template: str) -> bool:
    """True when the whole (trimmed) string is a single {{...}} placeholder."""
    trimmed = template.strip()
    if not (trimmed.startswith(OPEN) and trimmed.endswith(CLOSE)) or len(trimmed) < 4:
        return False
    return OPEN not in trimmed[2:-2]


class ExpressionEvaluator:
    """Evaluates template strings containing {{...}} placeholders."""

    def __init__(self, filters: Optional[TemplateFilters] = None):
        self.filters = filters or TemplateFilters()

    def evaluate_expression(self, expr: str, ctx: EvaluationContext) -> Any:
        """
        Evaluate a single expression (the content within {{ }}).

        Args:
            expr: Expression string, e.g. "feed.items | size"
            ctx: Evaluation context

        Returns:
            The filtered value, detached from the data model and scopes
        """
        path, filters = parse_expression(expr.strip())
        value = ctx.resolve(path)

        for name, arg in filters:
            value = self.filters.apply(name, value, arg)

        return detach(value)

    def evaluate_string(self, template: str, ctx: EvaluationContext) -> Any:
        """
        Evaluate a template string.

        Args:
            template: e.g. "{{feeds}}" or "Hello {{name}}!"
            ctx: Evaluation context

        Returns:
            The native value for a pure expression, else the interpolated string
        """
        if OPEN not in template:
            return template

        if is_pure_expression(template):
            return self.evaluate_expression(template.strip()[2:-2], ctx)

        return self.interpolate(template, ctx)

    def interpolate(self, template: str, ctx: EvaluationContext) -> str:
        """Substitute every {{...}} segment with its stringified value."""
        pieces = []
        pos = 0

        while pos < len(template):
            start = template.find(OPEN, pos)
            if start < 0:
                pieces.append(template[pos:])
                break

            pieces.append(template[pos:start])

            end = template.find(CLOSE, start + 2)
            if end < 0:
                # Unterminated placeholder stays literal
                pieces.append(template[start:])
                break

            value = self.evaluate_expression(template[start + 2:end], ctx)
            pieces.append(stringify(value))
            pos = end + 2

        return ''.join(pieces)
