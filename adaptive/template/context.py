"""
Scoped evaluation context for template expressions.

Paths resolve against a stack of scope frames (innermost first), then the
root data model.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ..config import EvaluationLimits


class EvaluationContext:
    """Holds the data model, the scope stack and the per-call loop budget."""

    def __init__(self, root: Dict[str, Any], limits: Optional[EvaluationLimits] = None):
        self.root = root
        self.limits = limits or EvaluationLimits()
        self._scopes: List[Dict[str, Any]] = []
        self._iterations = 0

    @property
    def scope_depth(self) -> int:
        """Number of scope frames currently pushed."""
        return len(self._scopes)

    def push_scope(self, frame: Dict[str, Any]) -> None:
        self._scopes.append(frame)

    def pop_scope(self) -> Dict[str, Any]:
        return self._scopes.pop()

    @contextmanager
    def scope(self, frame: Dict[str, Any]) -> Iterator["EvaluationContext"]:
        """Push a scope frame for the duration of a with-block."""
        self.push_scope(frame)
        try:
            yield self
        finally:
            self.pop_scope()

    def consume_iteration(self) -> bool:
        """
        Count one loop iteration against the evaluation budget.

        Returns:
            False once the budget is exhausted
        """
        if self._iterations >= self.limits.max_loop_iterations:
            return False
        self._iterations += 1
        return True

    def resolve(self, dot_path: str) -> Any:
        """
        Resolve a dot-path like "feed.title", "items.0.name" or "loop.index".

        Returns:
            The value found (not copied), or None if any segment is missing
        """
        if not dot_path:
            return None

        segments = dot_path.split('.')
        first = segments[0]

        for frame in reversed(self._scopes):
            if first in frame:
                return self.walk_path(frame[first], segments[1:])

        if isinstance(self.root, dict) and first in self.root:
            return self.walk_path(self.root[first], segments[1:])

        return None

    @staticmethod
    def walk_path(value: Any, segments: List[str]) -> Any:
        """Walk object keys and array indexes; None on the first miss."""
        for segment in segments:
            if value is None:
                return None
            if isinstance(value, dict):
                if segment not in value:
                    return None
                value = value[segment]
            elif isinstance(value, list):
                try:
                    index = int(segment)
                except ValueError:
                    return None
                if not 0 <= index < len(value):
                    return None
                value = value[index]
            else:
                return None
        return value
