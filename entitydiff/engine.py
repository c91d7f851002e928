"""Main comparison engine for entitydiff."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from .comparators import ValueComparator, flatten
from .exceptions import ExtractionError
from .extractor import EntityExtractor
from .filters import PathFilter
from .models import (
    CompareOptions,
    ComparisonResult,
    Difference,
    DiffType,
    Entity,
    MatchedPair,
    Summary,
    Timing,
)
from .utils import js_string

logger = logging.getLogger(__name__)

ROOT_ENTITY_ID = "root"


def stringify_id(entity_id: Any) -> str:
    """Coerce an entity id to the string used as its match key."""
    return js_string(entity_id)


def calculate_summary(differences: list[Difference], equal: int = 0) -> Summary:
    """Count differences by kind."""
    summary = Summary(total_differences=len(differences), equal=equal)
    for diff in differences:
        if diff.type == DiffType.ADDED:
            summary.added += 1
        elif diff.type == DiffType.DELETED:
            summary.deleted += 1
        elif diff.type == DiffType.MODIFIED:
            summary.modified += 1
    return summary


class ComparisonEngine:
    """
    Orchestrates a comparison between two lists of entities:

    1. Matching: index both sides by string-coerced id (last write wins)
    2. Diffing: run the value comparator on every matched pair
    3. Orphans: report unmatched ids as whole-entity additions/deletions
    4. Filtering: apply include/exclude path patterns
    5. Summary: count differences by kind

    The engine holds nothing but its options, so one instance can run any
    number of independent comparisons.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        """
        Initialize the engine.

        Args:
            options: Comparison options (uses defaults if not provided)
        """
        self.options = options or CompareOptions()
        self.comparator = ValueComparator(self.options)
        self.path_filter = PathFilter.from_options(self.options)

    def run_comparison(
        self,
        entities1: list[Entity],
        entities2: list[Entity]
    ) -> ComparisonResult:
        """
        Compare two entity lists.

        Args:
            entities1: Entities extracted from the first document
            entities2: Entities extracted from the second document

        Returns:
            ComparisonResult with matched pairs, orphans, differences and summary
        """
        start_time = time.perf_counter()

        map1 = self._index_entities(entities1)
        map2 = self._index_entities(entities2)

        matched: list[MatchedPair] = []
        only_in_first: list[Entity] = []
        only_in_second: list[Entity] = []
        differences: list[Difference] = []
        clean_pairs = 0

        for entity_id, entity1 in map1.items():
            entity2 = map2.get(entity_id)
            if entity2 is None:
                only_in_first.append(entity1)
                self._add_filtered(differences, Difference.deleted(f"ID: {entity_id}", entity1.data))
                continue

            matched.append(MatchedPair(entity_id, entity1.data, entity2.data))
            pair_diffs = self.path_filter.apply(self._compare_pair(entity1.data, entity2.data, entity_id))
            if not pair_diffs:
                clean_pairs += 1
            differences.extend(pair_diffs)

        for entity_id, entity2 in map2.items():
            if entity_id not in map1:
                only_in_second.append(entity2)
                self._add_filtered(differences, Difference.added(f"ID: {entity_id}", entity2.data))

        summary = calculate_summary(differences, equal=clean_pairs)

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"Compared {len(entities1)} vs {len(entities2)} entities: "
            f"{len(matched)} matched, {len(only_in_first)} only in first, "
            f"{len(only_in_second)} only in second, {summary.total_differences} differences"
        )

        return ComparisonResult(
            matched=matched,
            only_in_first=only_in_first,
            only_in_second=only_in_second,
            differences=differences,
            summary=summary,
            timing=Timing(
                duration_ms=duration_ms,
                objects_compared=len(entities1) + len(entities2)
            ),
            options=self.options,
        )

    def compare_documents(
        self,
        document1: Any,
        document2: Any,
        id_path: str = ""
    ) -> ComparisonResult:
        """
        Compare two whole documents, matching entities by id path.

        A blank id path compares the documents as single root entities. When
        extraction fails on either side both documents fall back to root
        entities.
        """
        if id_path and id_path.strip():
            extractor = EntityExtractor()
            try:
                entities1 = extractor.extract(document1, id_path)
                entities2 = extractor.extract(document2, id_path)
            except ExtractionError as e:
                logger.warning(f"Path extraction failed, using direct comparison: {e.reason}")
                entities1, entities2 = self._root_entities(document1, document2)
        else:
            entities1, entities2 = self._root_entities(document1, document2)

        return self.run_comparison(entities1, entities2)

    def _compare_pair(self, data1: Any, data2: Any, entity_id: str) -> list[Difference]:
        if isinstance(data1, dict) and isinstance(data2, dict):
            return self.comparator.compare_objects(data1, data2, entity_id)
        return flatten(self.comparator.compare_values(data1, data2, entity_id))

    def _add_filtered(self, differences: list[Difference], diff: Difference):
        if self.path_filter.should_include(diff.path):
            differences.append(diff)

    @staticmethod
    def _index_entities(entities: list[Entity]) -> dict[str, Entity]:
        indexed: dict[str, Entity] = {}
        for entity in entities:
            key = stringify_id(entity.id)
            if key in indexed:
                logger.debug(f"Duplicate entity id {key!r}, keeping the later entity")
            indexed[key] = entity
        return indexed

    @staticmethod
    def _root_entities(document1: Any, document2: Any) -> tuple[list[Entity], list[Entity]]:
        return [Entity(ROOT_ENTITY_ID, document1)], [Entity(ROOT_ENTITY_ID, document2)]


def run_comparison(
    entities1: list[Entity],
    entities2: list[Entity],
    options: Optional[CompareOptions] = None
) -> ComparisonResult:
    """Convenience function to compare two entity lists."""
    return ComparisonEngine(options).run_comparison(entities1, entities2)


def compare_documents(
    document1: Any,
    document2: Any,
    id_path: str = "",
    options: Optional[CompareOptions] = None
) -> ComparisonResult:
    """Convenience function to compare two documents."""
    return ComparisonEngine(options).compare_documents(document1, document2, id_path)
