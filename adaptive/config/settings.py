"""
Evaluation limits for the template engine.

Bounds recursion depth and the total number of loop iterations per
evaluation so that a runaway template only loses the offending branch.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_LOOP_ITERATIONS = 10_000


@dataclass(frozen=True)
class EvaluationLimits:
    """Resource bounds applied to every evaluate() call."""

    max_depth: int = DEFAULT_MAX_DEPTH
    max_loop_iterations: int = DEFAULT_MAX_LOOP_ITERATIONS

    def __post_init__(self):
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{field.name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvaluationLimits":
        """Build limits from a config mapping, ignoring unknown keys."""
        known = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
