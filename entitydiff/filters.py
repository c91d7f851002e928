"""Include/exclude path filtering applied to assembled difference lists."""

from __future__ import annotations

import re
from typing import Iterable

from .models import CompareOptions, Difference

_WILDCARD_TOKENS = re.compile(r"\*|\[\]|\$")


def strip_pattern(pattern: str) -> str:
    """Remove the no-op wildcard tokens *, [] and $ from a pattern."""
    return _WILDCARD_TOKENS.sub("", pattern)


def matches_pattern(path: str, pattern: str) -> bool:
    """Substring match of a path against a stripped pattern."""
    return strip_pattern(pattern) in path


class PathFilter:
    """
    Keeps or drops differences by path.

    Include patterns win when both lists are non-empty: a path is kept if it
    matches any include pattern. Otherwise a path is dropped if it matches
    any exclude pattern.
    """

    def __init__(self, include_paths: Iterable[str] = (), exclude_paths: Iterable[str] = ()):
        self.include_paths = tuple(include_paths)
        self.exclude_paths = tuple(exclude_paths)

    @classmethod
    def from_options(cls, options: CompareOptions) -> 'PathFilter':
        return cls(options.include_paths, options.exclude_paths)

    @property
    def active(self) -> bool:
        return bool(self.include_paths or self.exclude_paths)

    def should_include(self, path: str) -> bool:
        if self.include_paths:
            return any(matches_pattern(path, p) for p in self.include_paths)
        if self.exclude_paths:
            return not any(matches_pattern(path, p) for p in self.exclude_paths)
        return True

    def apply(self, differences: list[Difference]) -> list[Difference]:
        if not self.active:
            return list(differences)
        return [d for d in differences if self.should_include(d.path)]
