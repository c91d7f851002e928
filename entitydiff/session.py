"""Mutable session state for callers that browse comparison results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from .engine import ComparisonEngine
from .exceptions import DocumentLoadError
from .models import CompareOptions, ComparisonResult, Difference, DiffType
from .stats import detailed_stats
from .utils import canonical_json


class ComparisonSession:
    """
    Holds the last result and the current view over its differences.

    Usage:
        session = ComparisonSession(CompareOptions(numeric_tolerance=0.01))
        session.compare(doc1, doc2, id_path="users[].id")
        session.filter_by_type("modified")
        session.navigate(1)
        print(session.position, session.current)

    All comparison logic lives in the engine; the session only keeps the
    state a viewer needs between calls.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()
        self.last_result: Optional[ComparisonResult] = None
        self.visible: list[Difference] = []
        self.cursor = 0
        self.active_filter = "all"
        self.query = ""

    def compare(self, document1: Any, document2: Any, id_path: str = "") -> ComparisonResult:
        """Run a comparison and reset the view to all of its differences."""
        engine = ComparisonEngine(self.options)
        self.last_result = engine.compare_documents(document1, document2, id_path)
        self._reset_view()
        return self.last_result

    def filter_by_type(self, kind: Union[str, DiffType]) -> list[Difference]:
        """Show only differences of one kind, or "all"."""
        if isinstance(kind, DiffType):
            kind = kind.value
        if kind != "all":
            DiffType(kind)  # raises ValueError for unknown kinds

        self.active_filter = kind
        self.query = ""
        if kind == "all":
            self.visible = list(self._differences())
        else:
            self.visible = [d for d in self._differences() if d.type.value == kind]
        self.cursor = 0
        return self.visible

    def search(self, query: str) -> list[Difference]:
        """Show differences whose path or value contains the query, ignoring case."""
        self.query = query or ""
        self.active_filter = "all"
        needle = self.query.strip().lower()

        if not needle:
            self.visible = list(self._differences())
        else:
            self.visible = [
                d for d in self._differences()
                if needle in d.path.lower() or needle in canonical_json(d.display_value).lower()
            ]
        self.cursor = 0
        return self.visible

    def navigate(self, step: int) -> Optional[Difference]:
        """Move the cursor by step, wrapping at both ends."""
        if not self.visible:
            return None
        self.cursor = (self.cursor + step) % len(self.visible)
        return self.current

    @property
    def current(self) -> Optional[Difference]:
        if not self.visible:
            return None
        return self.visible[self.cursor]

    @property
    def position(self) -> str:
        total = len(self.visible)
        current = self.cursor + 1 if total else 0
        return f"{current} of {total}"

    def statistics(self) -> dict:
        if self.last_result is None:
            return {}
        return detailed_stats(self.last_result)

    def _differences(self) -> list[Difference]:
        return self.last_result.differences if self.last_result else []

    def _reset_view(self):
        self.active_filter = "all"
        self.query = ""
        self.visible = list(self._differences())
        self.cursor = 0

    @staticmethod
    def load_document(path: Union[str, Path]) -> Any:
        """
        Read a JSON document from disk.

        Raises:
            DocumentLoadError: if the file is missing or is not valid JSON
        """
        path = Path(path)
        if not path.exists():
            raise DocumentLoadError(f"Document not found: {path}", str(path))

        with open(path, 'r', encoding='utf-8') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise DocumentLoadError(
                    f"Invalid JSON in {path}: {e.msg}", str(path), e.lineno, e.colno
                )
            except UnicodeDecodeError as e:
                raise DocumentLoadError(f"Invalid UTF-8 in {path}: {e.reason}", str(path))
