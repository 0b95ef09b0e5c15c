"""Tests for csslens.lsp.document."""

from lsprotocol import types as lsp

from csslens.lsp.document import TextDocument


class TestPositionAt:
    def test_single_line(self):
        doc = TextDocument("a { color: red; }")
        assert doc.position_at(4) == lsp.Position(line=0, character=4)

    def test_multi_line(self):
        doc = TextDocument("a {\n  color: red;\n}")
        assert doc.position_at(6) == lsp.Position(line=1, character=2)
        assert doc.position_at(len(doc.text)) == lsp.Position(line=2, character=1)

    def test_crlf(self):
        doc = TextDocument("a {\r\n  b: c;\r\n}")
        assert doc.line_count == 3
        assert doc.position_at(5) == lsp.Position(line=1, character=0)

    def test_clamps(self):
        doc = TextDocument("abc")
        assert doc.position_at(-3) == lsp.Position(line=0, character=0)
        assert doc.position_at(99) == lsp.Position(line=0, character=3)


class TestOffsetAt:
    def test_round_trip(self):
        doc = TextDocument("a {\n  color: red;\n}\n")
        for offset in range(len(doc.text) + 1):
            assert doc.offset_at(doc.position_at(offset)) == offset

    def test_character_past_line_end(self):
        doc = TextDocument("ab\ncd")
        assert doc.offset_at(lsp.Position(line=0, character=10)) == 3

    def test_line_past_end(self):
        doc = TextDocument("ab\ncd")
        assert doc.offset_at(lsp.Position(line=7, character=0)) == 5

    def test_empty_document(self):
        doc = TextDocument("")
        assert doc.offset_at(lsp.Position(line=0, character=0)) == 0
        assert doc.position_at(0) == lsp.Position(line=0, character=0)
