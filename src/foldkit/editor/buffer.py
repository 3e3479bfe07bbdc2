"""Headless editing surface with a fold-aware rendering overlay.

The buffer keeps text, selection and hidden spans in memory so the folding
engine runs without a GUI. Edits are announced to edit listeners *before*
the text changes, which is the hook the fold registry uses to tear down folds
an edit touches. :mod:`foldkit.editor.qt_view` draws
the same state inside a PySide6 widget.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol

from .document_model import DocumentState, SelectionRange
from .protocols import CANCEL_ACTION, CONFIRM_ACTION, EditListener


class TextChangeListener(Protocol):
    """Callback signature invoked after the buffer text changes."""

    def __call__(self, text: str, state: DocumentState) -> None:
        ...


@dataclass(slots=True, eq=False)
class HiddenSpan:
    """Rendering artifact standing in for a hidden span of text."""

    start: int
    end: int
    glyph: str
    bindings: Mapping[str, Callable[[int], Any]] = field(default_factory=dict)
    active: bool = True

    def dispatch(self, action: str, position: int | None = None) -> bool:
        """Run the handler bound to ``action`` with the caret ``position``.

        Revealed spans capture nothing. Without a position the handler gets the
        span's start, where the glyph is drawn.
        """

        if not self.active:
            return False
        handler = self.bindings.get(action)
        if handler is None:
            return False
        handler(self.start if position is None else position)
        return True


class EditorBuffer:
    """In-memory document implementing the :class:`~foldkit.editor.protocols.FoldHost` surface."""

    def __init__(self, document: DocumentState | None = None) -> None:
        self._state = DocumentState()
        self._selection = SelectionRange()
        self._text_buffer: str = ""
        self._hidden: list[HiddenSpan] = []
        self._edit_listeners: list[EditListener] = []
        self._text_listeners: list[TextChangeListener] = []
        if document is not None:
            self.load_document(document)

    # ------------------------------------------------------------------
    # Document accessors
    # ------------------------------------------------------------------
    def load_document(self, document: DocumentState) -> None:
        """Replace the whole document and drop every overlay.

        Edit listeners are told the entire old text is being replaced, so
        registries tear down their folds before the new text arrives.
        """

        previous = len(self._text_buffer)
        for listener in list(self._edit_listeners):
            listener(0, previous, len(document.text) - previous)
        self._state = document
        self._selection = SelectionRange()
        self._text_buffer = document.text
        for span in self._hidden:
            span.active = False
        self._hidden.clear()
        self._emit_text_changed()

    def to_document(self) -> DocumentState:
        """Return the current document representation."""

        self._state.text = self._text_buffer
        self._state.selection = self.selection_range()
        return self._state

    @property
    def text(self) -> str:
        return self._text_buffer

    @property
    def document_path(self) -> Path | None:
        return self._state.metadata.path

    def __len__(self) -> int:
        return len(self._text_buffer)

    def read_region(self, start: int, end: int) -> str:
        begin, finish = self._clamp_range(start, end)
        return self._text_buffer[begin:finish]

    def stable_identity(self) -> str | None:
        return self._state.identity()

    # ------------------------------------------------------------------
    # Selection accessors
    # ------------------------------------------------------------------
    def set_selection(self, start: int, end: int | None = None) -> None:
        """Select ``[start, end]``; omitting ``end`` places a bare caret."""

        begin, finish = self._clamp_range(start, start if end is None else end)
        self._selection = SelectionRange(begin, finish)

    def move_cursor(self, position: int) -> None:
        self.set_selection(position)

    def selection_range(self) -> SelectionRange:
        """Return a copy of the current selection for internal consumers."""

        selection = self._selection
        return SelectionRange(selection.start, selection.end)

    def selection_span(self) -> tuple[int, int]:
        return self._selection.as_tuple()

    def has_active_selection(self) -> bool:
        return not self._selection.is_empty

    def clear_selection(self) -> None:
        """Collapse the selection onto the caret."""

        if self._selection.is_empty:
            return
        self._collapse_selection_to(self._selection.end)

    def cursor_position(self) -> int:
        return self._selection.end

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------
    def set_text(self, text: str) -> None:
        """Replace the entire document content with ``text``."""

        self._apply_edit(0, len(self._text_buffer), text)

    def insert_text(self, text: str, position: int | None = None) -> None:
        """Insert ``text`` at ``position`` or the caret."""

        start = position if position is not None else self.cursor_position()
        start, _ = self._clamp_range(start, start)
        self._apply_edit(start, start, text)
        self._collapse_selection_to(start + len(text))

    def replace_range(self, start: int, end: int, replacement: str) -> None:
        """Replace the slice ``[start:end]`` with ``replacement``."""

        begin, _ = self._clamp_range(start, end)
        self._apply_edit(start, end, replacement)
        self._collapse_selection_to(begin + len(replacement))

    def delete_range(self, start: int, end: int) -> None:
        self.replace_range(start, end, "")

    def _apply_edit(self, start: int, end: int, replacement: str) -> None:
        begin, finish = self._clamp_range(start, end)
        previous = self._text_buffer
        if previous[begin:finish] == replacement:
            return
        delta = len(replacement) - (finish - begin)
        # Listeners see the pre-edit text so they can compare against it.
        for listener in list(self._edit_listeners):
            listener(begin, finish, delta)
        self._shift_hidden(begin, finish, delta)
        self._text_buffer = previous[:begin] + replacement + previous[finish:]
        self._state.update_text(self._text_buffer)
        self._emit_text_changed()

    def _shift_hidden(self, begin: int, finish: int, delta: int) -> None:
        for span in self._hidden:
            if span.start > finish:
                span.start += delta
                span.end += delta
            elif span.end >= finish:
                span.end = max(span.start, span.end + delta)

    # ------------------------------------------------------------------
    # Rendering overlay
    # ------------------------------------------------------------------
    def hide_span(
        self,
        start: int,
        end: int,
        glyph: str,
        bindings: Mapping[str, Callable[[int], Any]],
    ) -> HiddenSpan:
        span = HiddenSpan(start=start, end=end, glyph=glyph, bindings=dict(bindings))
        self._hidden.append(span)
        self._emit_text_changed()
        return span

    def reveal_span(self, artifact: HiddenSpan) -> None:
        if not artifact.active:
            return
        artifact.active = False
        try:
            self._hidden.remove(artifact)
        except ValueError:  # pragma: no cover - artifact from another buffer
            return
        self._emit_text_changed()

    def hidden_spans(self) -> tuple[HiddenSpan, ...]:
        return tuple(self._hidden)

    def dispatch_key(self, action: str, position: int | None = None) -> bool:
        """Route ``action`` to the first hidden span covering ``position``.

        Returns ``False`` when no placeholder captures the key, in which case the
        caller falls back to normal input handling.
        """

        caret = self.cursor_position() if position is None else position
        for span in list(self._hidden):
            if span.start <= caret <= span.end and span.dispatch(action, caret):
                return True
        return False

    def visible_text(self) -> str:
        """Return the text as displayed, with each hidden region collapsed to its glyph.

        Overlapping and nested spans collapse into the glyph of the outermost
        span. Zero-length spans hide nothing and draw nothing.
        """

        text = self._text_buffer
        pieces: list[str] = []
        cursor = 0
        for start, end, glyph in self._collapsed_spans():
            pieces.append(text[cursor:start])
            pieces.append(glyph)
            cursor = end
        pieces.append(text[cursor:])
        return "".join(pieces)

    def document_offset(self, display_offset: int) -> int:
        """Translate an offset into :meth:`visible_text` back to a document offset.

        Offsets on a glyph resolve to the start of the span it hides.
        """

        shown = 0
        cursor = 0
        for start, end, glyph in self._collapsed_spans():
            plain = start - cursor
            if display_offset <= shown + plain:
                return cursor + max(0, display_offset - shown)
            shown += plain
            if display_offset < shown + len(glyph):
                return start
            shown += len(glyph)
            cursor = end
        return min(cursor + max(0, display_offset - shown), len(self._text_buffer))

    def _collapsed_spans(self) -> list[tuple[int, int, str]]:
        collapsed: list[tuple[int, int, str]] = []
        for span in sorted(self._hidden, key=lambda item: (item.start, -item.end)):
            if span.start == span.end:
                continue
            if not collapsed or span.start >= collapsed[-1][1]:
                collapsed.append((span.start, span.end, span.glyph))
            elif span.end > collapsed[-1][1]:
                start, _, glyph = collapsed[-1]
                collapsed[-1] = (start, span.end, glyph)
        return collapsed

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_edit_listener(self, listener: EditListener) -> None:
        """Register a callback fired before each modification is applied."""

        self._edit_listeners.append(listener)

    def remove_edit_listener(self, listener: EditListener) -> None:
        try:
            self._edit_listeners.remove(listener)
        except ValueError:
            pass

    def add_text_listener(self, listener: TextChangeListener) -> None:
        """Register a callback fired after the text or its overlay changes."""

        self._text_listeners.append(listener)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clamp_range(self, start: int, end: int) -> tuple[int, int]:
        length = len(self._text_buffer)
        start = max(0, min(int(start), length))
        end = max(0, min(int(end), length))
        if end < start:
            start, end = end, start
        return start, end

    def _collapse_selection_to(self, position: int | None = None) -> None:
        caret = len(self._text_buffer) if position is None else position
        caret = max(0, min(int(caret), len(self._text_buffer)))
        self._selection = SelectionRange(caret, caret)

    def _emit_text_changed(self) -> None:
        for listener in list(self._text_listeners):
            listener(self._text_buffer, self._state)


__all__ = [
    "CANCEL_ACTION",
    "CONFIRM_ACTION",
    "EditorBuffer",
    "HiddenSpan",
    "TextChangeListener",
]
