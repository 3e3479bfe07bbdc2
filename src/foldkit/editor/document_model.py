"""Plain data carried by an :class:`~foldkit.editor.buffer.EditorBuffer`."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

__all__ = ["DocumentMetadata", "DocumentState", "SelectionRange"]


@dataclass(slots=True)
class DocumentMetadata:
    path: Optional[Path] = None


@dataclass(slots=True)
class SelectionRange:
    """Anchor/caret pair; ``end`` is where the caret sits and may precede ``start``."""

    start: int = 0
    end: int = 0

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(slots=True)
class DocumentState:
    """Text of an open document plus where it came from."""

    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    selection: SelectionRange = field(default_factory=SelectionRange)
    dirty: bool = False

    def update_text(self, new_text: str) -> None:
        self.text = new_text
        self.dirty = True

    def identity(self) -> str | None:
        """Key under which folds of this document are persisted.

        Only documents backed by a file have one; the key is the resolved path
        so that ``./a.txt`` and ``/abs/a.txt`` name the same document.
        """

        if self.metadata.path is None:
            return None
        return str(Path(self.metadata.path).expanduser().resolve())
