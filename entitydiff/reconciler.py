"""Array reconciliation strategies for the entitydiff engine."""

from __future__ import annotations

from typing import Any, Optional

from .models import ArrayMatching, CompareOptions, ComparisonMode, Difference
from .utils import canonical_json


class ArrayReconciler:
    """
    Decides whether two arrays are equal under the active matching strategy.

    Strategies:
    - index: canonical serialization, or set comparison with ignore-order
    - id: set of element identifiers with ignore-order, else index
    - hash: order-independent hash of sorted element serializations
    - best_match: length check, then index

    Every strategy reports at most one difference carrying both whole arrays.
    """

    def __init__(self, options: CompareOptions):
        self.options = options

    def compare_arrays(self, old: list, new: list, path: str) -> Optional[Difference]:
        """Compare two arrays using the configured strategy."""
        strategy = self.options.array_matching
        if strategy == ArrayMatching.ID:
            return self._compare_by_id(old, new, path)
        elif strategy == ArrayMatching.HASH:
            return self._compare_by_hash(old, new, path)
        elif strategy == ArrayMatching.BEST_MATCH:
            return self._compare_by_best_match(old, new, path)
        return self._compare_by_index(old, new, path)

    def _compare_by_index(self, old: list, new: list, path: str) -> Optional[Difference]:
        if self.options.mode == ComparisonMode.IGNORE_ORDER:
            # Multiplicity is deliberately not counted
            old_set = {canonical_json(item) for item in old}
            new_set = {canonical_json(item) for item in new}
            if old_set == new_set:
                return None

        if canonical_json(old) == canonical_json(new):
            return None

        return Difference.modified(path, old, new)

    def _compare_by_id(self, old: list, new: list, path: str) -> Optional[Difference]:
        if self.options.mode == ComparisonMode.IGNORE_ORDER:
            old_ids = {self.item_id(item) for item in old}
            new_ids = {self.item_id(item) for item in new}
            if old_ids == new_ids:
                return None

        return self._compare_by_index(old, new, path)

    def _compare_by_hash(self, old: list, new: list, path: str) -> Optional[Difference]:
        if self.hash_array(old) == self.hash_array(new):
            return None
        return Difference.modified(path, old, new)

    def _compare_by_best_match(self, old: list, new: list, path: str) -> Optional[Difference]:
        if len(old) != len(new):
            return Difference.modified(path, old, new)
        # TODO: pair equal-length arrays element by element instead of deferring to index
        return self._compare_by_index(old, new, path)

    @staticmethod
    def item_id(item: Any) -> Any:
        """
        Identifier used by the id strategy.

        Objects use the first truthy of id, _id and key, else their canonical
        serialization. Anything else is identified by its own value.
        Identifiers are serialized so that True and 1 stay distinct.
        """
        if isinstance(item, dict):
            for key in ("id", "_id", "key"):
                value = item.get(key)
                if value:
                    return canonical_json(value)
        return canonical_json(item)

    @staticmethod
    def hash_array(arr: list) -> str:
        """Order-independent canonical hash of an array."""
        return canonical_json(sorted(canonical_json(item) for item in arr))
