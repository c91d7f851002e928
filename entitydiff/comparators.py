"""Value comparison for the entitydiff engine."""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from .models import CompareOptions, ComparisonMode, Difference
from .reconciler import ArrayReconciler
from .utils import (
    MISSING,
    build_path,
    is_numeric,
    js_string,
    js_typeof,
    json_equal,
    last_segment,
)


TIMESTAMP_PATTERNS = [
    re.compile(r"timestamp", re.IGNORECASE),
    re.compile(r"created.*at", re.IGNORECASE),
    re.compile(r"updated.*at", re.IGNORECASE),
    re.compile(r"modified.*at", re.IGNORECASE),
    re.compile(r"date", re.IGNORECASE),
    re.compile(r"time", re.IGNORECASE),
]

CompareOutcome = Union[Difference, list[Difference], None]


def is_timestamp_path(path: str) -> bool:
    """Check if the last segment of a path looks like a timestamp field."""
    segment = last_segment(path)
    return any(pattern.search(segment) for pattern in TIMESTAMP_PATTERNS)


def flatten(outcome: CompareOutcome) -> list[Difference]:
    """Turn a comparison outcome into a flat list of differences."""
    if outcome is None:
        return []
    if isinstance(outcome, list):
        return outcome
    return [outcome]


def _is_absent(value: Any) -> bool:
    return value is None or value is MISSING


class ValueComparator:
    """
    Recursively compares two JSON values under a set of options.

    The decision order is fixed and each step short-circuits:
    nulls, string normalization, timestamp suppression, numeric tolerance,
    type-only mode, arrays, objects and finally primitives.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()
        self.reconciler = ArrayReconciler(self.options)

    def compare_values(self, old: Any, new: Any, path: str = "") -> CompareOutcome:
        """
        Compare two values.

        Args:
            old: Value from the first document
            new: Value from the second document
            path: Dotted path of the values

        Returns:
            None when equal, a single Difference, or a list of nested Differences
        """
        options = self.options

        if (old is None and new is None) or (old is MISSING and new is MISSING):
            return None

        if _is_absent(old) or _is_absent(new):
            return Difference.modified(path, old, new)

        processed_old = old
        processed_new = new
        if options.normalize_strings and isinstance(old, str) and isinstance(new, str):
            processed_old = old.strip().lower()
            processed_new = new.strip().lower()

        if options.ignore_timestamps and is_timestamp_path(path):
            return None

        if options.numeric_tolerance > 0 and is_numeric(old) and is_numeric(new):
            if abs(old - new) <= options.numeric_tolerance:
                return None

        if options.mode == ComparisonMode.TYPE:
            old_type = js_typeof(old)
            new_type = js_typeof(new)
            if old_type != new_type:
                return Difference.modified(
                    path,
                    f"{old_type}: {js_string(old)}",
                    f"{new_type}: {js_string(new)}",
                )
            return None

        if isinstance(old, list) and isinstance(new, list):
            return self.reconciler.compare_arrays(old, new, path)

        if isinstance(old, dict) and isinstance(new, dict):
            nested = self.compare_objects(old, new, path)
            return nested or None

        if self._primitives_equal(processed_old, processed_new):
            return None

        return Difference.modified(path, old, new)

    def compare_objects(self, old: dict, new: dict, base_path: str = "") -> list[Difference]:
        """Compare two objects key by key; key order never matters."""
        differences: list[Difference] = []
        all_keys = list(old.keys()) + [k for k in new.keys() if k not in old]

        for key in all_keys:
            path = build_path(base_path, key)

            if key not in old:
                differences.append(Difference.added(path, new[key]))
            elif key not in new:
                if not self.options.ignore_extra_keys:
                    differences.append(Difference.deleted(path, old[key]))
            else:
                differences.extend(flatten(self.compare_values(old[key], new[key], path)))

        return differences

    def _primitives_equal(self, old: Any, new: Any) -> bool:
        if self.options.case_sensitive or isinstance(old, (dict, list)) or isinstance(new, (dict, list)):
            return json_equal(old, new)
        return js_string(old).lower() == js_string(new).lower()


def compare_values(
    old: Any,
    new: Any,
    path: str = "",
    options: Optional[CompareOptions] = None
) -> CompareOutcome:
    """Convenience function to compare two values."""
    return ValueComparator(options).compare_values(old, new, path)
