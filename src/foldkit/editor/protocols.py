"""Protocols describing what the folding engine needs from an editing surface."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

CONFIRM_ACTION = "confirm"
CANCEL_ACTION = "cancel"


class EditListener(Protocol):
    """Callback invoked *before* an edit is applied to the text.

    ``edit_start``/``edit_end`` are offsets in the pre-edit text and ``delta``
    is the change in document length the edit will produce.
    """

    def __call__(self, edit_start: int, edit_end: int, delta: int) -> None:
        ...


class FoldHost(Protocol):
    """Document + rendering capabilities consumed by :mod:`foldkit.folding`."""

    def __len__(self) -> int:
        ...

    def read_region(self, start: int, end: int) -> str:
        ...

    def selection_span(self) -> tuple[int, int]:
        ...

    def has_active_selection(self) -> bool:
        ...

    def clear_selection(self) -> None:
        ...

    def cursor_position(self) -> int:
        ...

    def hide_span(
        self,
        start: int,
        end: int,
        glyph: str,
        bindings: Mapping[str, Callable[[int], Any]],
    ) -> Any:
        ...

    def reveal_span(self, artifact: Any) -> None:
        ...

    def add_edit_listener(self, listener: EditListener) -> None:
        ...

    def remove_edit_listener(self, listener: EditListener) -> None:
        ...

    def stable_identity(self) -> str | None:
        ...


__all__ = ["CANCEL_ACTION", "CONFIRM_ACTION", "EditListener", "FoldHost"]
