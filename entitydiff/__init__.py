"""
entitydiff - JSON Comparison Engine with Entity Matching

A stateless engine that extracts identifiable entities from two JSON
documents, matches them by id and reports structural differences under
configurable normalization and array matching rules.
"""

from .engine import (
    ComparisonEngine,
    compare_documents,
    run_comparison,
)
from .comparators import ValueComparator, compare_values
from .reconciler import ArrayReconciler
from .extractor import EntityExtractor, extract_entities
from .filters import PathFilter
from .models import (
    CompareOptions,
    ComparisonMode,
    ArrayMatching,
    ComparisonResult,
    Difference,
    DiffType,
    Entity,
    MatchedPair,
    Summary,
    Timing,
)
from .exceptions import (
    EntityDiffError,
    ExtractionError,
    ConfigError,
    DocumentLoadError,
)
from .config import load_options
from .session import ComparisonSession
from .utils import MISSING

__version__ = "1.0.0"
__all__ = [
    # Engine
    "ComparisonEngine",
    "compare_documents",
    "run_comparison",
    "ValueComparator",
    "compare_values",
    "ArrayReconciler",
    "PathFilter",
    # Extraction
    "EntityExtractor",
    "extract_entities",
    # Models
    "CompareOptions",
    "ComparisonMode",
    "ArrayMatching",
    "ComparisonResult",
    "Difference",
    "DiffType",
    "Entity",
    "MatchedPair",
    "Summary",
    "Timing",
    "MISSING",
    # Errors
    "EntityDiffError",
    "ExtractionError",
    "ConfigError",
    "DocumentLoadError",
    # Caller helpers
    "load_options",
    "ComparisonSession",
]
