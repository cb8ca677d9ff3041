"""
Output tree ownership and JSON text parsing.

An output tree never shares nodes with the template, the scopes, the data
model, or another evaluation's output. Every value taken from one of those
sources passes through ``detach`` before it is inserted.
"""

import copy
import json
from typing import Any


def detach(value: Any) -> Any:
    """Deep-copy a value so the caller owns it exclusively."""
    return copy.deepcopy(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: Any) -> Any:
    """Parse JSON text strictly; NaN and Infinity literals raise ValueError."""
    return json.loads(text, parse_constant=_reject_constant)
