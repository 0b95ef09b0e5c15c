"""Offset and position conversion for stylesheet text."""

from __future__ import annotations

import bisect

from lsprotocol import types as lsp


class TextDocument:
    """Read-only view of a document's text with line bookkeeping.

    Positions count characters of the Python string, which matches what
    LSP clients send for the ASCII content stylesheets mostly consist of.
    """

    def __init__(self, text: str, uri: str = "", version: int | None = None):
        self.text = text
        self.uri = uri
        self.version = version
        self._line_offsets = _compute_line_offsets(text)

    @property
    def line_count(self) -> int:
        return len(self._line_offsets)

    def position_at(self, offset: int) -> lsp.Position:
        offset = max(0, min(offset, len(self.text)))
        line = bisect.bisect_right(self._line_offsets, offset) - 1
        return lsp.Position(line=line, character=offset - self._line_offsets[line])

    def offset_at(self, position: lsp.Position) -> int:
        if position.line >= len(self._line_offsets):
            return len(self.text)
        if position.line < 0:
            return 0
        line_offset = self._line_offsets[position.line]
        if position.line + 1 < len(self._line_offsets):
            next_line_offset = self._line_offsets[position.line + 1]
        else:
            next_line_offset = len(self.text)
        return max(min(line_offset + position.character, next_line_offset), line_offset)


def _compute_line_offsets(text: str) -> list[int]:
    offsets = [0]
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\r" or ch == "\n":
            if ch == "\r" and i + 1 < len(text) and text[i + 1] == "\n":
                i += 1
            offsets.append(i + 1)
        i += 1
    return offsets
