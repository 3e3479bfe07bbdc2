"""Folding engine: registries, occurrence scanning and fold persistence."""

from .commands import COMMANDS, run_command
from .lifecycle import FoldManager
from .occurrences import find_all_occurrences
from .persistence import FoldPersistenceStore
from .registry import DEFAULT_PLACEHOLDER, FoldRange, FoldRegistry

__all__ = [
    "COMMANDS",
    "DEFAULT_PLACEHOLDER",
    "FoldManager",
    "FoldPersistenceStore",
    "FoldRange",
    "FoldRegistry",
    "find_all_occurrences",
    "run_command",
]
