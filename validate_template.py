#!/usr/bin/env python3
"""
validate_template.py - View template validator

Checks a JSON view template for problems the engine would only report as
warnings at evaluation time: malformed $for/$if control nodes, unknown
filters, and unterminated placeholders.

Usage:
    python validate_template.py <template_file>
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, NamedTuple

from adaptive.rendering.nodes import (
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
from adaptive.template.expressions import CLOSE, OPEN, parse_expression
from adaptive.template.filters import FILTERS
from adaptive.tree import parse_json


ERROR = "error"
WARNING = "warning"

ROOT = "$"


class Issue(NamedTuple):
    """One problem found at a template location."""

    severity: str
    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class TemplateValidator:
    """
    Walks a view template and records problems by location.

    Locations are JSONPath-like: ``$.sections[1].$template.title``.
    """

    def __init__(self, template_path: str):
        self.template_path = Path(template_path)
        self.issues: List[Issue] = []
        self.loop_count = 0
        self.conditional_count = 0
        self.expression_count = 0

    @property
    def errors(self) -> List[str]:
        return [str(issue) for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> List[str]:
        return [str(issue) for issue in self.issues if issue.severity == WARNING]

    @property
    def summary(self) -> str:
        return (f"{self.loop_count} loop(s), {self.conditional_count} conditional(s), "
                f"{self.expression_count} expression(s)")

    def is_valid(self) -> bool:
        return not self.errors

    def validate(self) -> "TemplateValidator":
        """Run all checks; the validator itself carries the findings."""
        if not self.template_path.exists():
            self._report(ERROR, ROOT, f"Template file not found: {self.template_path}")
            return self

        try:
            template = parse_json(self.template_path.read_text(encoding="utf-8"))
        except ValueError as e:
            self._report(ERROR, ROOT, f"Template is not valid JSON: {e}")
            return self

        if template is None:
            self._report(ERROR, ROOT, "Template is JSON null")
            return self

        self.validate_node(template, ROOT)
        return self

    def issues_by_location(self) -> Dict[str, List[Issue]]:
        """Group issues by template location, in the order they were found."""
        grouped: Dict[str, List[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.location, []).append(issue)
        return grouped

    def print_report(self):
        """Print the issues found, one block per template location."""
        print(f"\nTEMPLATE VALIDATION REPORT: {self.template_path}")
        print(f"  {self.summary}\n")

        for location, issues in self.issues_by_location().items():
            print(location)
            for issue in issues:
                print(f"  [{issue.severity}] {issue.message}")

        error_count = len(self.errors)
        if error_count:
            print(f"\nTemplate has {error_count} error(s), {len(self.warnings)} warning(s).")
        else:
            print(f"\nTemplate is valid ({len(self.warnings)} warning(s)).")

    def _report(self, severity: str, location: str, message: str):
        self.issues.append(Issue(severity, location, message))

    def validate_node(self, node: Any, location: str):
        """Validate a node and its children."""
        kind = classify(node)

        if kind is NodeKind.LOOP:
            self.loop_count += 1
            self._validate_loop(node, location)
        elif kind is NodeKind.CONDITIONAL:
            self.conditional_count += 1
            self._validate_conditional(node, location)
        elif kind is NodeKind.OBJECT:
            for key, value in node.items():
                self.validate_node(value, f"{location}.{key}")
        elif kind is NodeKind.ARRAY:
            for index, element in enumerate(node):
                self.validate_node(element, f"{location}[{index}]")
        elif kind is NodeKind.EXPRESSION:
            self._validate_string(node, location)

    def _validate_loop(self, node: dict, location: str):
        item_var = node.get(FOR_KEY)
        if not isinstance(item_var, str) or not item_var:
            self._report(ERROR, location, "$for must name a binding")
        elif item_var == LOOP_VAR:
            self._report(WARNING, location, f"binding '{LOOP_VAR}' is hidden by the loop context")

        if IF_KEY in node:
            self._report(WARNING, location, "$if is ignored on a $for node")

        collection_path = node.get(IN_KEY)
        if not isinstance(collection_path, str):
            self._report(ERROR, location, "$for loop is missing a $in collection path")
        else:
            self._validate_expression(collection_path.strip(OPEN + CLOSE + " "), location)

        if node.get(TEMPLATE_KEY) is None:
            self._report(ERROR, location, "$for loop is missing $template")
        else:
            self.validate_node(node[TEMPLATE_KEY], f"{location}.$template")

        if node.get(EMPTY_KEY) is not None:
            self.validate_node(node[EMPTY_KEY], f"{location}.$empty")

    def _validate_conditional(self, node: dict, location: str):
        condition = node.get(IF_KEY)
        if not isinstance(condition, str):
            self._report(ERROR, location, "$if must be a path string")
        else:
            self._validate_expression(condition.strip(OPEN + CLOSE + " "), location)

        if node.get(THEN_KEY) is None and node.get(ELSE_KEY) is None:
            self._report(WARNING, location, "$if has neither $then nor $else")

        for key in (THEN_KEY, ELSE_KEY):
            if node.get(key) is not None:
                self.validate_node(node[key], f"{location}.{key}")

    def _validate_string(self, text: str, location: str):
        pos = 0
        while True:
            start = text.find(OPEN, pos)
            if start < 0:
                break
            end = text.find(CLOSE, start + 2)
            if end < 0:
                self._report(WARNING, location, "unterminated placeholder will be kept as text")
                break
            self._validate_expression(text[start + 2:end], location)
            pos = end + 2

    def _validate_expression(self, expr: str, location: str):
        self.expression_count += 1
        path, filters = parse_expression(expr.strip())
        if not path:
            self._report(WARNING, location, f"expression '{expr.strip()}' has an empty path")
        for name, _arg in filters:
            if name not in FILTERS:
                self._report(WARNING, location, f"unknown filter '{name}'")


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: python validate_template.py <template_file>")
        print("\nExample:")
        print("  python validate_template.py configs/views/feed.json")
        return 1

    validator = TemplateValidator(sys.argv[1]).validate()
    validator.print_report()

    return 0 if validator.is_valid() else 1


if __name__ == "__main__":
    exit(main())
