"""PySide6 view rendering an :class:`EditorBuffer` with its folds collapsed.

The widget shows :meth:`EditorBuffer.visible_text` read-only. Return/Enter and
Escape pressed on a placeholder glyph are routed to the glyph's input bindings
before normal key handling runs.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QPlainTextEdit, QWidget

from ..folding.commands import run_command
from ..folding.lifecycle import FoldManager
from .buffer import EditorBuffer
from .document_model import DocumentState
from .protocols import CANCEL_ACTION, CONFIRM_ACTION

__all__ = ["FoldedTextView"]


def _action_for_key(key: Any) -> str | None:
    value = getattr(key, "value", key)
    if value in (Qt.Key.Key_Return.value, Qt.Key.Key_Enter.value):
        return CONFIRM_ACTION
    if value == Qt.Key.Key_Escape.value:
        return CANCEL_ACTION
    return None


class FoldedTextView(QPlainTextEdit):
    """Read-only text view that draws folded spans as placeholder glyphs."""

    def __init__(
        self,
        buffer: EditorBuffer,
        manager: FoldManager,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._buffer = buffer
        self._manager = manager
        self.setReadOnly(True)
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse | Qt.TextInteractionFlag.TextSelectableByKeyboard
        )
        buffer.add_text_listener(self._handle_buffer_changed)
        self.refresh()

    @property
    def buffer(self) -> EditorBuffer:
        return self._buffer

    def refresh(self) -> None:
        """Redraw the visible text, keeping the caret where it was."""

        caret = self.textCursor().position()
        self.setPlainText(self._buffer.visible_text())
        cursor = self.textCursor()
        cursor.setPosition(min(caret, len(self.toPlainText())))
        self.setTextCursor(cursor)

    def run_command(self, name: str) -> Any:
        """Copy the view selection into the buffer, in document offsets, and run a fold command."""

        cursor = self.textCursor()
        self._buffer.set_selection(
            self._buffer.document_offset(cursor.selectionStart()),
            self._buffer.document_offset(cursor.selectionEnd()),
        )
        return run_command(name, self._manager, self._buffer)

    def keyPressEvent(self, event: Any) -> None:  # noqa: N802 - Qt override
        action = _action_for_key(event.key())
        if action is not None:
            position = self._buffer.document_offset(self.textCursor().position())
            if self._buffer.dispatch_key(action, position):
                event.accept()
                return
        super().keyPressEvent(event)

    def _handle_buffer_changed(self, text: str, state: DocumentState) -> None:
        del text, state
        self.refresh()
