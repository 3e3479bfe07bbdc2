"""Validated ``(start, end)`` offset pairs shared by folds, matches and storage."""

from __future__ import annotations

import operator
from collections import namedtuple
from collections.abc import Mapping
from typing import Any

__all__ = ["InvalidRangeError", "TextRange"]


class InvalidRangeError(ValueError):
    """Raised when a span is reversed, negative, or outside the document."""


def _offset(value: Any, label: str) -> int:
    # Text such as "12" comes from the command line; anything else must be a
    # true integer, so 6.9 is rejected rather than truncated.
    if isinstance(value, bool):
        raise InvalidRangeError(f"{label} must be an integer, not {value!r}")
    try:
        number = int(value) if isinstance(value, str) else operator.index(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRangeError(f"{label} must be an integer, not {value!r}") from exc
    if number < 0:
        raise InvalidRangeError(f"{label} offset {number} is negative")
    return number


class TextRange(namedtuple("TextRange", ("start", "end"))):
    """Absolute document offsets with ``start <= end``.

    Behaves as a plain 2-tuple, so ranges unpack, index, hash and compare like
    the ``(start, end)`` pairs the persistence store keeps.

    >>> TextRange.parse("4:9")
    TextRange(start=4, end=9)
    """

    __slots__ = ()

    def __new__(cls, start: Any, end: Any) -> "TextRange":
        first = _offset(start, "start")
        last = _offset(end, "end")
        if last < first:
            raise InvalidRangeError(f"end {last} precedes start {first}")
        return super().__new__(cls, first, last)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_caret(self) -> bool:
        return self.start == self.end

    def covers(self, position: int) -> bool:
        """Whether ``position`` lies on ``[start, end]``, both edges included.

        A placeholder glyph occupies a single display point, so a caret
        touching either edge addresses the span.
        """

        return self.start <= position <= self.end

    def intersects(self, start: int, end: int) -> bool:
        return self.start <= end and start <= self.end

    def validate(self, length: int) -> "TextRange":
        """Return ``self`` if it fits a document of ``length`` characters."""

        if self.end > length:
            raise InvalidRangeError(f"{self.start}:{self.end} exceeds document length {length}")
        return self

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def parse(cls, text: str) -> "TextRange":
        """Build a range from ``"START:END"``."""

        head, colon, tail = str(text).partition(":")
        if not colon:
            raise InvalidRangeError(f"expected START:END, got {text!r}")
        return cls(head.strip(), tail.strip())

    @classmethod
    def from_value(cls, value: Any) -> "TextRange":
        """Accept a range, ``"S:E"`` string, ``{"start", "end"}`` mapping, pair, or span-like object."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, Mapping):
            if "start" not in value or "end" not in value:
                raise InvalidRangeError(f"mapping needs 'start' and 'end' keys: {dict(value)!r}")
            return cls(value["start"], value["end"])
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise InvalidRangeError(f"expected a pair, got {len(value)} item(s)")
            return cls(*value)
        if hasattr(value, "start") and hasattr(value, "end"):
            return cls(value.start, value.end)
        raise TypeError(f"cannot build a TextRange from {type(value).__name__}")
