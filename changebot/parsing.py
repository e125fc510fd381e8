"""Translate raw model output into file records.

The model is asked to emit each file as a block introduced by a marker line::

    <<<<<<< FILE: path/to/file.ext >>>>>>>
    ...complete file content...

A block runs until the next marker line or the end of the text. Content that
itself contains a marker line cannot be represented.
"""

from __future__ import annotations

from typing import List, Optional

from .logging import get_logger
from .models import FileRecord

MARKER_OPEN = "<<<<<<< FILE:"
MARKER_CLOSE = ">>>>>>>"

DEFAULT_SOURCE_PATH = "index.js"
DEFAULT_DATA_PATH = "data.json"
DEFAULT_DOCS_PATH = "README.md"

_SOURCE_PREFIXES = ("import", "function")
_DATA_PREFIXES = ("{", "[")

logger = get_logger("parsing")


def marker_path(line: str) -> Optional[str]:
    """Return the path named by a marker line, or ``None`` when ``line`` is not a marker."""
    if not line.startswith(MARKER_OPEN):
        return None
    stripped = line.rstrip()
    if len(stripped) < len(MARKER_OPEN) + len(MARKER_CLOSE):
        return None
    if not stripped.endswith(MARKER_CLOSE):
        return None
    return stripped[len(MARKER_OPEN) : -len(MARKER_CLOSE)].strip()


def format_marker(path: str) -> str:
    return f"{MARKER_OPEN} {path} {MARKER_CLOSE}"


class ResponseParser:
    """Line-scanning parser for the FILE block grammar with a single-file fallback."""

    def __init__(
        self,
        *,
        source_path: str = DEFAULT_SOURCE_PATH,
        data_path: str = DEFAULT_DATA_PATH,
        docs_path: str = DEFAULT_DOCS_PATH,
    ) -> None:
        self.source_path = source_path
        self.data_path = data_path
        self.docs_path = docs_path

    def parse(self, raw_text: str) -> List[FileRecord]:
        records = self.parse_blocks(raw_text)
        if records:
            return records

        stripped = (raw_text or "").strip()
        if not stripped:
            return []

        fallback_path = self.fallback_path(stripped)
        logger.warning(
            "No FILE markers found in model response; treating it as %s", fallback_path
        )
        return [FileRecord(path=fallback_path, content=stripped)]

    def parse_blocks(self, raw_text: str) -> List[FileRecord]:
        """Return every well-formed block in source order; duplicate paths are kept."""
        records: List[FileRecord] = []
        current_path: Optional[str] = None
        buffer: List[str] = []

        # Split on "\n" only; "\r" and other separators stay part of the content.
        for line in (raw_text or "").split("\n"):
            path = marker_path(line)
            if path is None:
                if current_path is not None:
                    buffer.append(line)
                continue
            self._emit(records, current_path, buffer)
            current_path = path
            buffer = []

        self._emit(records, current_path, buffer)
        return records

    def fallback_path(self, text: str) -> str:
        """Pick a path for unstructured output from its leading characters."""
        head = text.lstrip()
        if head.startswith(_SOURCE_PREFIXES):
            return self.source_path
        if head.startswith(_DATA_PREFIXES):
            return self.data_path
        return self.docs_path

    @staticmethod
    def _emit(records: List[FileRecord], path: Optional[str], lines: List[str]) -> None:
        if not path:
            return
        content = "\n".join(lines).strip()
        if not content:
            return
        records.append(FileRecord(path=path, content=content))


def parse_response(raw_text: str) -> List[FileRecord]:
    return ResponseParser().parse(raw_text)


__all__ = [
    "DEFAULT_DATA_PATH",
    "DEFAULT_DOCS_PATH",
    "DEFAULT_SOURCE_PATH",
    "MARKER_CLOSE",
    "MARKER_OPEN",
    "ResponseParser",
    "format_marker",
    "marker_path",
    "parse_response",
]
