"""Derived statistics over a comparison summary."""

from __future__ import annotations

import math

from .models import ComparisonResult, Summary


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def match_percentage(summary: Summary) -> int:
    """Share of equal entities among all counted outcomes, as a whole percent."""
    total = summary.added + summary.deleted + summary.modified + summary.equal
    if total == 0:
        return 0
    return _round_half_up(summary.equal / total * 100)


def accuracy_score(summary: Summary) -> str:
    """Equal entities count fully, modifications count half."""
    total = summary.total_differences + summary.equal
    if total == 0:
        return "N/A"
    score = (summary.equal + summary.modified * 0.5) / total * 100
    return f"{_round_half_up(score)}%"


def data_integrity(summary: Summary) -> str:
    """Rate the severity of deletions and modifications."""
    critical = summary.deleted + summary.modified * 0.7
    if critical == 0:
        return "Perfect"
    if critical < 5:
        return "High"
    if critical < 20:
        return "Medium"
    return "Low"


def change_density(summary: Summary) -> str:
    """Share of changes among all counted outcomes."""
    changes = summary.added + summary.deleted + summary.modified
    total = changes + summary.equal
    if total == 0:
        return "N/A"
    return f"{_round_half_up(changes / total * 100)}%"


def detailed_stats(result: ComparisonResult) -> dict:
    """Collect every derived statistic for a result."""
    timing = result.timing
    return {
        "duration_ms": timing.duration_ms if timing else 0,
        "objects_compared": timing.objects_compared if timing else 0,
        "match_percentage": match_percentage(result.summary),
        "accuracy_score": accuracy_score(result.summary),
        "data_integrity": data_integrity(result.summary),
        "change_density": change_density(result.summary),
    }
