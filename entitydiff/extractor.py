"""Entity extraction by identifier path for the entitydiff engine."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as jsonpath_parse

from .exceptions import ExtractionError
from .models import Entity
from .utils import MISSING, get_nested_value

logger = logging.getLogger(__name__)


@lru_cache(maxsize=128)
def _compile_jsonpath(expression: str):
    """Compile and cache a JSONPath expression."""
    try:
        return jsonpath_parse(expression)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ExtractionError(f"Invalid JSONPath expression '{expression}': {e}", expression)


def split_jsonpath(expression: str) -> tuple[str, str]:
    """
    Split a JSONPath expression into the locator and the trailing id field.

    Only a dot outside brackets and quotes counts, so filter expressions such
    as $.items[?(@.kind == "a.b")].id split correctly.
    """
    depth = 0
    quote = None
    split_at = -1

    for i, char in enumerate(expression):
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
        elif char == "." and depth == 0:
            split_at = i

    if split_at <= 0 or split_at == len(expression) - 1:
        raise ExtractionError(
            f"JSONPath expression '{expression}' must end with an id field", expression
        )

    return expression[:split_at], expression[split_at + 1:]


class EntityExtractor:
    """
    Extracts (id, data) entities from a document using an id path.

    Supported path syntax:
    - Empty or "id": items of a root array (or the root object) with an id
    - Array path: "users[].id", "data.items[].meta.uid", "[].id"
    - Nested path: "user.profile.id", "records.uid"
    - JSONPath: "$.users[*].id", "$.products[?(@.category == 'tools')].sku"
    """

    def extract(self, document: Any, path: str = "") -> list[Entity]:
        """
        Extract entities from a document.

        Raises:
            ExtractionError: if the path cannot resolve to any usable entity
        """
        path = (path or "").strip()

        if not path or path == "id":
            entities = self._extract_root(document)
        elif path.startswith("$"):
            entities = self._extract_jsonpath(document, path)
        elif "[]" in path:
            entities = self._extract_from_array_path(document, path)
        else:
            entities = self._extract_from_nested_path(document, path)

        if not entities:
            raise ExtractionError(f"No entities with a defined id at path {path}", path)

        logger.debug(f"Extracted {len(entities)} entities using path {path!r}")
        return entities

    def _extract_root(self, document: Any) -> list[Entity]:
        if isinstance(document, list):
            return [
                Entity(item["id"], item)
                for item in document
                if isinstance(item, dict) and "id" in item
            ]
        if isinstance(document, dict) and "id" in document:
            return [Entity(document["id"], document)]
        raise ExtractionError("No objects with id field found", "id")

    def _extract_from_array_path(self, document: Any, path: str) -> list[Entity]:
        array_path, _, id_field = path.partition("[]")
        if id_field.startswith("."):
            id_field = id_field[1:]

        array_data = get_nested_value(document, array_path)
        if not isinstance(array_data, list):
            raise ExtractionError(f"Path {array_path} does not point to an array", path)

        return self._entities_from_items(array_data, id_field or "id")

    def _extract_from_nested_path(self, document: Any, path: str) -> list[Entity]:
        object_path, _, id_field = path.rpartition(".")
        target = get_nested_value(document, object_path)

        if isinstance(target, list):
            return self._entities_from_items(target, id_field)

        if isinstance(target, dict):
            entity_id = get_nested_value(target, id_field)
            if entity_id is not MISSING:
                return [Entity(entity_id, target)]

        raise ExtractionError(f"No objects found with id field at path {path}", path)

    def _extract_jsonpath(self, document: Any, path: str) -> list[Entity]:
        locator, id_field = split_jsonpath(path)
        expr = _compile_jsonpath(locator)

        items = []
        for match in expr.find(document):
            if isinstance(match.value, list):
                items.extend(match.value)
            else:
                items.append(match.value)

        return self._entities_from_items(items, id_field)

    @staticmethod
    def _entities_from_items(items: list, id_field: str) -> list[Entity]:
        entities = []
        for item in items:
            if not isinstance(item, dict):
                continue
            entity_id = get_nested_value(item, id_field)
            if entity_id is not MISSING:
                entities.append(Entity(entity_id, item))
        return entities


def extract_entities(document: Any, path: str = "") -> list[Entity]:
    """Convenience function to extract entities from a document."""
    return EntityExtractor().extract(document, path)
