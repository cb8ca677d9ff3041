"""
Template node rendering.

Walks a template tree and produces the output tree: objects and arrays are
rebuilt, $for loops and $if conditionals are expanded, and {{expression}}
strings are evaluated against the context.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..template import ConditionEvaluator, EvaluationContext, ExpressionEvaluator
from ..tree import detach
from .nodes import (
    ELSE_KEY,
    EMPTY_KEY,
    FOR_KEY,
    IF_KEY,
    IN_KEY,
    LOOP_VAR,
    TEMPLATE_KEY,
    THEN_KEY,
    NodeKind,
    classify,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any, EvaluationContext, int], Any]


class NodeRenderer:
    """Renders template nodes against an evaluation context."""

    def __init__(self, expr_evaluator: Optional[ExpressionEvaluator] = None):
        self.expr_evaluator = expr_evaluator or ExpressionEvaluator()
        self.condition_evaluator = ConditionEvaluator(self.expr_evaluator)

        self._handlers: Dict[NodeKind, Handler] = {
            NodeKind.LOOP: self.render_loop,
            NodeKind.CONDITIONAL: self.render_conditional,
            NodeKind.OBJECT: self.render_object,
            NodeKind.ARRAY: self.render_array,
            NodeKind.EXPRESSION: self.render_expression,
            NodeKind.LITERAL: self.render_literal,
        }
        unhandled = set(NodeKind) - set(self._handlers)
        if unhandled:
            raise TypeError(f"No renderer for node kinds: {sorted(k.value for k in unhandled)}")

    def render(self, node: Any, ctx: EvaluationContext, depth: int = 0) -> Any:
        """
        Render a single template node.

        Args:
            node: Template node (any JSON value)
            ctx: Evaluation context
            depth: Nesting depth of this node in the template

        Returns:
            The rendered value, or None when the node produces nothing
        """
        if depth > ctx.limits.max_depth:
            logger.warning("Template nesting exceeds max depth %d, skipping sub-tree", ctx.limits.max_depth)
            return None

        try:
            return self._handlers[classify(node)](node, ctx, depth)
        except RecursionError:
            logger.warning("Recursion limit reached at depth %d, skipping sub-tree", depth)
            return None

    def render_object(self, node: Dict[str, Any], ctx: EvaluationContext, depth: int) -> Dict[str, Any]:
        """Render every property value, preserving key order."""
        return {key: self.render(value, ctx, depth + 1) for key, value in node.items()}

    def render_array(self, node: List[Any], ctx: EvaluationContext, depth: int) -> List[Any]:
        """
        Render every element of an array.

        A $for element is spliced into the array (its items become siblings);
        a $if element contributes one item, or nothing when it renders None.
        """
        result = []
        for element in node:
            kind = classify(element)
            rendered = self.render(element, ctx, depth + 1)

            if kind is NodeKind.LOOP:
                if isinstance(rendered, list):
                    result.extend(rendered)
                elif rendered is not None:
                    result.append(rendered)
            elif kind is NodeKind.CONDITIONAL:
                if rendered is not None:
                    result.append(rendered)
            else:
                result.append(rendered)
        return result

    def render_loop(self, node: Dict[str, Any], ctx: EvaluationContext, depth: int) -> Any:
        """
        Render a $for loop.

        Template format:
            {"$for": "item", "$in": "feed.items", "$template": {...}, "$empty": {...}}

        Returns:
            List of rendered items, the rendered $empty fallback, or None
        """
        item_var = node.get(FOR_KEY)
        collection_path = node.get(IN_KEY)
        body = node.get(TEMPLATE_KEY)

        if not isinstance(item_var, str) or not isinstance(collection_path, str) or body is None:
            logger.warning("$for loop missing required properties ($for, $in, $template)")
            return None

        collection = self.condition_evaluator.evaluate_value(collection_path, ctx)
        if not isinstance(collection, list) or not collection:
            empty = node.get(EMPTY_KEY)
            return self.render(empty, ctx, depth + 1) if empty is not None else None

        items = []
        length = len(collection)
        # collection is already a detached copy, so its items can be bound as-is
        for index, item in enumerate(collection):
            if not ctx.consume_iteration():
                logger.warning(
                    "Loop iteration budget of %d exhausted in $for %s, truncating",
                    ctx.limits.max_loop_iterations, item_var,
                )
                break

            frame = {
                item_var: item,
                LOOP_VAR: {
                    "index": index,
                    "first": index == 0,
                    "last": index == length - 1,
                    "length": length,
                },
            }
            with ctx.scope(frame):
                rendered = self.render(body, ctx, depth + 1)

            if rendered is not None:
                items.append(rendered)

        return items

    def render_conditional(self, node: Dict[str, Any], ctx: EvaluationContext, depth: int) -> Any:
        """
        Render a $if conditional.

        Template format:
            {"$if": "user.is_admin", "$then": {...}, "$else": {...}}
        """
        condition = node.get(IF_KEY)
        if not isinstance(condition, str):
            logger.warning("$if condition must be a path string, got %s", type(condition).__name__)
            return None

        branch_key = THEN_KEY if self.condition_evaluator.evaluate_condition(condition, ctx) else ELSE_KEY
        branch = node.get(branch_key)
        return self.render(branch, ctx, depth + 1) if branch is not None else None

    def render_expression(self, node: str, ctx: EvaluationContext, depth: int) -> Any:
        return self.expr_evaluator.evaluate_string(node, ctx)

    def render_literal(self, node: Any, ctx: EvaluationContext, depth: int) -> Any:
        return detach(node)
