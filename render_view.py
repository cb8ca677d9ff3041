#!/usr/bin/env python3
"""
render_view.py - Render a view template against a data model

A CLI tool that evaluates a JSON view template against a JSON data document
and prints (or writes) the resulting component tree. Useful for previewing
templates without running the server.

Usage:
    python render_view.py configs/views/feed.json data/feed.json --pretty
    python render_view.py view.json host_state.json --select '$.view_data'
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from adaptive.config import DataLoader, EvaluationLimits
from adaptive.rendering import TemplateEngine, TemplateParseError
from adaptive.template.filters import to_json

logger = logging.getLogger("render_view")


def load_data(data_path: str, select: Optional[str] = None) -> Any:
    """
    Load the data document and pick the data model root.

    Args:
        data_path: Path to the JSON data document
        select: Optional JSONPath expression selecting the model root

    Returns:
        The data model
    """
    data_file = Path(data_path)
    loader = DataLoader(str(data_file.parent))
    return loader.load_model(data_file.name, select or "$")


def render(template_path: str, data_path: str, select: Optional[str] = None,
           limits: Optional[EvaluationLimits] = None, pretty: bool = False) -> str:
    """Render a template file against a data file and return the JSON output."""
    engine = TemplateEngine.from_file(template_path, limits)
    data_model = load_data(data_path, select)
    logger.info("Rendering %s with data from %s", template_path, data_path)

    if pretty:
        result = engine.evaluate_tree(data_model)
        return to_json(result if result is not None else {}, indent=2)
    return engine.evaluate(data_model)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Render a JSON view template against a data model"
    )
    parser.add_argument("template_file", help="Path to the JSON view template")
    parser.add_argument("data_file", help="Path to the JSON data document")
    parser.add_argument("--select", help="JSONPath selecting the data model inside the document (default: $)")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum template nesting depth")
    parser.add_argument("--max-iterations", type=int, default=None, help="Maximum total loop iterations")
    parser.add_argument("-o", "--output", help="Write the output to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log evaluation warnings and progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = {}
        if args.max_depth is not None:
            overrides["max_depth"] = args.max_depth
        if args.max_iterations is not None:
            overrides["max_loop_iterations"] = args.max_iterations
        limits = EvaluationLimits.from_dict(overrides)

        output = render(args.template_file, args.data_file, args.select, limits, args.pretty)
    except (FileNotFoundError, TemplateParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    exit(main())
