"""Data models for the entitydiff engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .utils import MISSING

logger = logging.getLogger(__name__)


class DiffType(Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"


class ComparisonMode(Enum):
    EXACT = "exact"
    TYPE = "type"
    IGNORE_ORDER = "ignore-order"


class ArrayMatching(Enum):
    INDEX = "index"
    ID = "id"
    HASH = "hash"
    BEST_MATCH = "best_match"


# camelCase option names accepted alongside the python field names
_OPTION_ALIASES = {
    "mode": "mode",
    "arrayMatching": "array_matching",
    "normalizeStrings": "normalize_strings",
    "ignoreTimestamps": "ignore_timestamps",
    "ignoreKeyOrder": "ignore_key_order",
    "numericTolerance": "numeric_tolerance",
    "includePaths": "include_paths",
    "excludePaths": "exclude_paths",
    "caseSensitive": "case_sensitive",
    "ignoreExtraKeys": "ignore_extra_keys",
}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _parse_paths(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split("\n")
    elif not isinstance(value, (list, tuple)):
        logger.warning(f"Ignoring path patterns that are not a list or string: {value!r}")
        return ()
    return tuple(str(p).strip() for p in value if str(p).strip())


@dataclass(frozen=True)
class CompareOptions:
    """Immutable configuration threaded through every comparison call."""
    mode: ComparisonMode = ComparisonMode.EXACT
    array_matching: ArrayMatching = ArrayMatching.INDEX
    normalize_strings: bool = False
    ignore_timestamps: bool = False
    ignore_key_order: bool = True
    numeric_tolerance: float = 0.0
    include_paths: tuple[str, ...] = ()
    exclude_paths: tuple[str, ...] = ()
    case_sensitive: bool = True
    ignore_extra_keys: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'CompareOptions':
        """
        Build options from a mapping.

        Both camelCase and snake_case names are accepted. Unknown keys are
        ignored and values that cannot be parsed keep their default.
        """
        if not data:
            return cls()

        kwargs: dict[str, Any] = {}
        field_names = set(_OPTION_ALIASES.values())

        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in field_names:
                continue

            if name == "mode":
                try:
                    kwargs[name] = ComparisonMode(value)
                except ValueError:
                    logger.warning(f"Ignoring unknown comparison mode: {value!r}")
            elif name == "array_matching":
                try:
                    kwargs[name] = ArrayMatching(value)
                except ValueError:
                    logger.warning(f"Ignoring unknown array matching strategy: {value!r}")
            elif name == "numeric_tolerance":
                try:
                    kwargs[name] = float(value or 0)
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring non-numeric tolerance: {value!r}")
            elif name in ("include_paths", "exclude_paths"):
                kwargs[name] = _parse_paths(value)
            else:
                kwargs[name] = _parse_bool(value)

        return cls(**kwargs)

    def merged(self, overrides: dict) -> 'CompareOptions':
        """Return a copy with the given camelCase or snake_case overrides applied."""
        base = self.to_dict()
        base.update(overrides)
        return CompareOptions.from_dict(base)

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "arrayMatching": self.array_matching.value,
            "normalizeStrings": self.normalize_strings,
            "ignoreTimestamps": self.ignore_timestamps,
            "ignoreKeyOrder": self.ignore_key_order,
            "numericTolerance": self.numeric_tolerance,
            "includePaths": list(self.include_paths),
            "excludePaths": list(self.exclude_paths),
            "caseSensitive": self.case_sensitive,
            "ignoreExtraKeys": self.ignore_extra_keys,
        }


@dataclass
class Entity:
    """An identifiable unit extracted from a document for pairwise matching."""
    id: Any
    data: Any

    def to_dict(self) -> dict:
        return {"id": self.id, "data": self.data}


@dataclass
class Difference:
    """A single difference found during comparison."""
    type: DiffType
    path: str
    value: Any = MISSING
    old_value: Any = MISSING
    new_value: Any = MISSING

    @classmethod
    def added(cls, path: str, value: Any) -> 'Difference':
        return cls(DiffType.ADDED, path, value=value)

    @classmethod
    def deleted(cls, path: str, value: Any) -> 'Difference':
        return cls(DiffType.DELETED, path, value=value)

    @classmethod
    def modified(cls, path: str, old_value: Any, new_value: Any) -> 'Difference':
        return cls(DiffType.MODIFIED, path, old_value=old_value, new_value=new_value)

    @property
    def display_value(self) -> Any:
        """The value shown for search and listings: value, else new, else old."""
        for candidate in (self.value, self.new_value, self.old_value):
            if candidate is not MISSING and candidate is not None:
                return candidate
        return None

    def to_dict(self) -> dict:
        result = {"type": self.type.value, "path": self.path}
        if self.type == DiffType.MODIFIED:
            result["oldValue"] = None if self.old_value is MISSING else self.old_value
            result["newValue"] = None if self.new_value is MISSING else self.new_value
        else:
            result["value"] = None if self.value is MISSING else self.value
        return result


@dataclass
class MatchedPair:
    """Two entities that share an identifier."""
    id: str
    json1: Any
    json2: Any

    def to_dict(self) -> dict:
        return {"id": self.id, "json1": self.json1, "json2": self.json2}


@dataclass
class Summary:
    """Counts of each difference kind."""
    total_differences: int = 0
    added: int = 0
    deleted: int = 0
    modified: int = 0
    equal: int = 0

    def to_dict(self) -> dict:
        return {
            "totalDifferences": self.total_differences,
            "added": self.added,
            "deleted": self.deleted,
            "modified": self.modified,
            "equal": self.equal,
        }


@dataclass
class Timing:
    """Execution metadata."""
    duration_ms: int = 0
    objects_compared: int = 0

    def to_dict(self) -> dict:
        return {
            "duration": self.duration_ms,
            "objectsCompared": self.objects_compared,
        }


@dataclass
class ComparisonResult:
    """
    Complete comparison result.

    Everything except timing is a pure function of the inputs and options;
    timing holds wall-clock duration, so compare results without it.
    """
    matched: list[MatchedPair] = field(default_factory=list)
    only_in_first: list[Entity] = field(default_factory=list)
    only_in_second: list[Entity] = field(default_factory=list)
    differences: list[Difference] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    timing: Optional[Timing] = None
    options: Optional[CompareOptions] = None

    @property
    def is_match(self) -> bool:
        return not self.differences

    def to_dict(self, include_matched: bool = True) -> dict:
        result = {
            "summary": self.summary.to_dict(),
            "differences": [d.to_dict() for d in self.differences],
            "onlyInFirst": [e.to_dict() for e in self.only_in_first],
            "onlyInSecond": [e.to_dict() for e in self.only_in_second],
        }
        if include_matched:
            result["matched"] = [m.to_dict() for m in self.matched]
        if self.timing:
            result["timing"] = self.timing.to_dict()
        if self.options:
            result["options"] = self.options.to_dict()
        return result
