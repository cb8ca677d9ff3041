"""
View template and data model loaders.

Handles loading of view templates, engine settings, and data-model documents.
"""

import logging
from pathlib import Path
from typing import Any, List

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JSONPathError

from ..tree import parse_json
from .settings import EvaluationLimits

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads view templates and engine settings from a config directory."""

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self.views_dir = self.config_dir / "views"
        self.engine_file = self.config_dir / "engine.json"

    def load_view_text(self, view_name: str) -> str:
        """Load the raw template JSON text for a view."""
        view_file = self.views_dir / f"{view_name}.json"
        if not view_file.exists():
            raise FileNotFoundError(f"View template not found: {view_name}")

        return view_file.read_text(encoding="utf-8")

    def list_views(self) -> List[str]:
        """Names of all view templates in the views directory."""
        if not self.views_dir.is_dir():
            return []
        return sorted(path.stem for path in self.views_dir.glob("*.json"))

    def load_limits(self) -> EvaluationLimits:
        """Load evaluation limits from engine.json, or defaults if absent."""
        if not self.engine_file.exists():
            return EvaluationLimits()

        with open(self.engine_file, encoding="utf-8") as f:
            settings = parse_json(f.read())

        logger.debug("Loaded engine settings from %s", self.engine_file)
        return EvaluationLimits.from_dict(settings)


class DataLoader:
    """Loads data-model documents and selects the model root with JSONPath."""

    def __init__(self, data_dir: str = "data"):
        self.data_dir = Path(data_dir)

    def load_document(self, name: str) -> Any:
        """
        Load a data document by name.

        Args:
            name: Document name, with or without the .json suffix

        Returns:
            Parsed JSON data from the document file
        """
        filename = name if name.endswith(".json") else f"{name}.json"
        data_file = self.data_dir / filename

        if not data_file.exists():
            raise FileNotFoundError(f"Data document not found: {name}")

        with open(data_file, encoding="utf-8") as f:
            return parse_json(f.read())

    @staticmethod
    def select(document: Any, expression: str = "$") -> Any:
        """
        Pick the data model root from a host document.

        Args:
            document: Parsed JSON document
            expression: JSONPath expression, e.g. "$.payload"

        Returns:
            The first match, the whole document for "$", or {} with no match
        """
        if not expression or expression.strip() == "$":
            return document

        try:
            matches = jsonpath_parse(expression).find(document)
        except JSONPathError as e:
            raise ValueError(f"Invalid JSONPath expression {expression!r}: {e}") from e

        if not matches:
            logger.warning("JSONPath %s matched nothing, using empty data model", expression)
            return {}
        return matches[0].value

    def load_model(self, name: str, expression: str = "$") -> Any:
        """Load a document and select its data model root."""
        return self.select(self.load_document(name), expression)
