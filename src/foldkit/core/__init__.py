"""Core domain types shared by the folding engine and the editor surface."""

from .ranges import InvalidRangeError, TextRange

__all__ = ["InvalidRangeError", "TextRange"]
