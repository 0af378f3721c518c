"""File boundary helpers: the only place where timeline text touches disk."""

from __future__ import annotations

from pathlib import Path

from .importer import Format

_EXTENSIONS: dict[str, Format] = {".csv": "csv", ".yaml": "yaml", ".yml": "yaml"}


def detect_format(path: str | Path) -> Format:
    """Return the document format implied by the file extension.

    Raises
    ------
    ValueError
        If the extension is not ``.csv``, ``.yaml`` or ``.yml``.
    """
    suffix = Path(path).suffix.lower()
    try:
        return _EXTENSIONS[suffix]
    except KeyError:
        raise ValueError(f"cannot infer format from extension {suffix!r}: {path}") from None


def read_document(path: str | Path) -> tuple[str, Format]:
    """Read a timeline document as UTF-8 text and detect its format."""
    p = Path(path).expanduser()
    fmt = detect_format(p)
    return p.read_text(encoding="utf-8"), fmt


def write_document(path: str | Path, text: str) -> Path:
    """Write exported text to ``path`` (parent directories are created)."""
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


__all__ = ["detect_format", "read_document", "write_document"]
