"""Editor package containing document models, buffers and views."""

from importlib import import_module
from typing import Any

from . import buffer, document_model

__all__ = ["buffer", "document_model"]


def __getattr__(name: str) -> Any:
	if name in {"workspace", "qt_view"}:
		module = import_module(f"{__name__}.{name}")
		globals()[name] = module
		return module
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
