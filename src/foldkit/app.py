"""Command line entry point for foldkit."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_type_hints

from .core.ranges import InvalidRangeError, TextRange
from .editor.workspace import DocumentTab, DocumentWorkspace
from .folding.lifecycle import FoldManager
from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging_utils.get_logger(__name__)


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Send foldkit's log records to the rotating log file (and stderr when debugging)."""

    level = logging.DEBUG if debug else logging.WARNING
    path = logging_utils.setup_logging(level, console=debug, force=force)
    _LOGGER.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), path)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Return the effective settings, using defaults when the file cannot be read."""

    store = store if store is not None else SettingsStore(path)
    try:
        return store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Could not read settings from %s, using defaults: %s", store.path, exc)
        return Settings()


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    """Entry point invoked by the ``foldkit`` console script."""

    destination = stdout or sys.stdout
    args = _parse_cli_args(argv)
    debug = args.debug or _env_flag("FOLDKIT_DEBUG")
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("FOLDKIT_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    settings = load_settings(resolved_path, store=store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, store, overrides=cli_overrides, stream=destination)
        return 0
    if settings.debug_logging and not debug:
        configure_logging(True, force=True)
    if args.path is None:
        print("A document path is required unless --dump-settings is given.", file=sys.stderr)
        raise SystemExit(2)

    workspace = DocumentWorkspace(FoldManager.from_settings(settings))
    try:
        tab = workspace.open_document(args.path)
    except OSError as exc:
        print(f"Cannot open {args.path}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        _apply_fold_requests(workspace, tab, args)
    except InvalidRangeError as exc:
        print(f"Invalid fold: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if args.gui:
        return launch_gui(workspace, tab)
    if args.list:
        payload = [TextRange(start, end).to_dict() for start, end in workspace.registry(tab.id).snapshot()]
        json.dump(payload, destination, indent=2)
        destination.write("\n")
    else:
        destination.write(tab.buffer.visible_text())
    return 0


def _apply_fold_requests(workspace: DocumentWorkspace, tab: DocumentTab, args: argparse.Namespace) -> None:
    registry = workspace.registry(tab.id)
    for raw in args.folds:
        span = TextRange.parse(raw)
        registry.create_fold(span.start, span.end)
    for literal in args.occurrences:
        registry.fold_occurrences(literal)
    for position in args.unfold_at:
        registry.unfold_at(position)


def launch_gui(workspace: DocumentWorkspace, tab: DocumentTab) -> int:
    """Show ``tab`` in a :class:`FoldedTextView` and run the Qt event loop."""

    try:  # Local import to keep PySide6 off the CLI startup path.
        from PySide6.QtWidgets import QApplication

        from .editor.qt_view import FoldedTextView
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to launch the foldkit viewer.") from exc

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("foldkit")
    view = FoldedTextView(tab.buffer, workspace.manager)
    view.setWindowTitle(tab.title)
    view.show()
    try:
        return int(app.exec())
    finally:
        workspace.close_document(tab.id)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUE_VALUES


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="foldkit",
        description="Fold spans of a text document and print what remains visible.",
    )
    parser.add_argument("path", nargs="?", help="Document to open.")
    parser.add_argument(
        "--fold",
        dest="folds",
        metavar="START:END",
        action="append",
        default=[],
        help="Fold the characters between START and END (repeatable).",
    )
    parser.add_argument(
        "--fold-occurrences",
        dest="occurrences",
        metavar="TEXT",
        action="append",
        default=[],
        help="Fold every literal occurrence of TEXT (repeatable).",
    )
    parser.add_argument(
        "--unfold-at",
        dest="unfold_at",
        metavar="POS",
        type=int,
        action="append",
        default=[],
        help="Remove every fold covering POS (repeatable, applied last).",
    )
    parser.add_argument("--list", action="store_true", help="Print folds as JSON instead of the text.")
    parser.add_argument("--gui", action="store_true", help="Open the document in the Qt viewer.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.foldkit/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this run (repeatable).",
    )
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into typed :class:`Settings` field values."""

    field_types = get_type_hints(Settings)
    overrides: Dict[str, Any] = {}
    for item in items:
        name, equals, raw = item.partition("=")
        name = name.strip()
        if not equals or not name:
            raise ValueError(f"expected KEY=VALUE, got '{item}'.")
        if name not in field_types:
            raise ValueError(f"Unknown setting '{name}'.")
        overrides[name] = _as_bool(raw) if field_types[name] is bool else raw.strip()
    return overrides


def _as_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word not in _TRUE_VALUES | _FALSE_VALUES:
        raise ValueError(f"'{raw}' is not a boolean (try on/off).")
    return word in _TRUE_VALUES


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO,
) -> None:
    metadata = {
        "path": str(store.path),
        "log_file": str(logging_utils.log_path() or ""),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": sorted(name for name in os.environ if name.startswith("FOLDKIT_")),
    }
    json.dump({"settings": asdict(settings), "meta": metadata}, stream, indent=2)
    stream.write("\n")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
