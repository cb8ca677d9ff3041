"""
Template node kinds and the reserved control-node vocabulary.
"""

from enum import Enum
from typing import Any

from ..template.expressions import OPEN

FOR_KEY = "$for"
IN_KEY = "$in"
TEMPLATE_KEY = "$template"
EMPTY_KEY = "$empty"
IF_KEY = "$if"
THEN_KEY = "$then"
ELSE_KEY = "$else"

LOOP_VAR = "loop"


class NodeKind(Enum):
    """The closed set of template node shapes."""

    LOOP = "loop"
    CONDITIONAL = "conditional"
    OBJECT = "object"
    ARRAY = "array"
    EXPRESSION = "expression"
    LITERAL = "literal"


def classify(node: Any) -> NodeKind:
    """
    Determine the kind of a template node.

    Examples:
        >>> classify({"$for": "x", "$in": "xs", "$template": "{{x}}"})
        <NodeKind.LOOP: 'loop'>
        >>> classify("Hello {{name}}")
        <NodeKind.EXPRESSION: 'expression'>
    """
    if isinstance(node, dict):
        if FOR_KEY in node:
            return NodeKind.LOOP
        if IF_KEY in node:
            return NodeKind.CONDITIONAL
        return NodeKind.OBJECT
    if isinstance(node, list):
        return NodeKind.ARRAY
    if isinstance(node, str) and OPEN in node:
        return NodeKind.EXPRESSION
    return NodeKind.LITERAL

