"""Decode documents from disk into the text that fold offsets index."""

from __future__ import annotations

import codecs
import locale
from pathlib import Path

__all__ = ["read_text", "sniff_encoding"]

_SIGNATURES = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def sniff_encoding(data: bytes) -> str:
    """Pick a codec for ``data``: a byte-order mark wins, then the first codec that decodes cleanly."""

    for signature, codec in _SIGNATURES:
        if data.startswith(signature):
            return codec
    fallbacks = ["utf-8", locale.getpreferredencoding(False) or "utf-8"]
    for codec in dict.fromkeys(fallbacks):
        try:
            data.decode(codec)
        except UnicodeDecodeError:
            continue
        return codec
    # latin-1 maps every byte, so decoding never fails
    return "latin-1"


def read_text(path: Path | str, *, encoding: str | None = None, normalize_newlines: bool = True) -> str:
    """Return the decoded contents of ``path``.

    Line endings are folded to ``\\n`` by default so that offsets saved in one
    session line up with the text decoded in the next.
    """

    data = Path(path).read_bytes()
    text = data.decode(encoding or sniff_encoding(data)).lstrip("\ufeff")
    if normalize_newlines and "\r" in text:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text
