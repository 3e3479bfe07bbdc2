"""Fold spans of document text behind a placeholder and keep them consistent across edits."""

from .core.ranges import InvalidRangeError, TextRange
from .folding import FoldManager, FoldPersistenceStore, FoldRange, FoldRegistry, find_all_occurrences

__version__ = "0.1.0"

__all__ = [
    "FoldManager",
    "FoldPersistenceStore",
    "FoldRange",
    "FoldRegistry",
    "InvalidRangeError",
    "TextRange",
    "__version__",
    "find_all_occurrences",
]
