"""Build stylesheet node trees from tree-sitter CSS parse trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import tree_sitter_css
from tree_sitter import Language, Parser
from tree_sitter import Node as TSNode

from .nodes import Node, NodeType

logger = logging.getLogger(__name__)

_COMBINATORS = frozenset({
    "child_selector",
    "descendant_selector",
    "sibling_selector",
    "adjacent_sibling_selector",
})

# Parts of a compound selector that may carry a selector prefix
# (e.g. the "a" in "a.link" or "a:hover").
_PREFIXED = frozenset({
    "class_selector",
    "id_selector",
    "pseudo_class_selector",
    "pseudo_element_selector",
    "attribute_selector",
    "namespace_selector",
})

_SELECTOR_TYPES = _PREFIXED | _COMBINATORS | {
    "tag_name",
    "universal_selector",
    "nesting_selector",
}

_PSEUDO_TYPES = {
    "pseudo_class_selector": ":",
    "pseudo_element_selector": "::",
}

# At-rules the stylesheet model gives their own node kinds. Any other
# at-keyword is an unknown at-rule. Vendor "@-*-keyframes" count as known too.
_KNOWN_AT_RULES = frozenset({
    "@charset",
    "@font-face",
    "@import",
    "@keyframes",
    "@media",
    "@-moz-document",
    "@-ms-viewport",
    "@namespace",
    "@page",
    "@supports",
    "@viewport",
})

_parser: Parser | None = None


def _get_parser() -> Parser:
    """Lazily create the tree-sitter parser."""
    global _parser
    if _parser is None:
        _parser = Parser(Language(tree_sitter_css.language()))
    return _parser


class _OffsetMap:
    """Map tree-sitter byte offsets to string character offsets."""

    def __init__(self, text: str, data: bytes):
        self._chars: list[int] | None = None
        if len(data) != len(text):
            chars = []
            for i, ch in enumerate(text):
                chars.extend([i] * len(ch.encode("utf-8")))
            chars.append(len(text))
            self._chars = chars

    def __call__(self, byte_offset: int) -> int:
        if self._chars is None:
            return byte_offset
        return self._chars[byte_offset]


@dataclass
class _Compound:
    """Byte range of one compound selector and of its pseudo parts."""

    start: int
    end: int
    pseudos: list[tuple[int, int]] = field(default_factory=list)


class _TreeBuilder:
    def __init__(self, text: str, data: bytes):
        self.text = text
        self.offset = _OffsetMap(text, data)

    def make(self, node_type: NodeType, ts: TSNode, name: str = "") -> Node:
        return self.make_range(node_type, ts.start_byte, ts.end_byte, name=name)

    def make_range(self, node_type: NodeType, start_byte: int, end_byte: int, name: str = "") -> Node:
        start = self.offset(start_byte)
        end = self.offset(end_byte)
        return Node(type=node_type, offset=start, end=end, text=self.text[start:end], name=name)

    def source(self, ts: TSNode) -> str:
        return self.text[self.offset(ts.start_byte):self.offset(ts.end_byte)]

    def convert(self, ts: TSNode, parent: Node):
        kind = ts.type
        if kind == "comment":
            return
        if kind == "selectors":
            for child in ts.named_children:
                if child.type != "comment":
                    parent.add_child(self.selector(child))
            return
        if kind == "declaration":
            prop = next((c for c in ts.named_children if c.type == "property_name"), None)
            name = self.source(prop) if prop is not None else ""
            parent.add_child(self.make(NodeType.DECLARATION, ts, name=name))
            return

        if kind == "rule_set":
            node = self.make(NodeType.RULESET, ts)
        elif kind == "block":
            node = self.make(NodeType.DECLARATIONS, ts)
        elif kind == "at_rule":
            keyword = next((c for c in ts.named_children if c.type == "at_keyword"), None)
            name = self.source(keyword) if keyword is not None else ""
            node_type = NodeType.OTHER if _is_known_at_rule(name) else NodeType.UNKNOWN_AT_RULE
            node = self.make(node_type, ts, name=name)
        else:
            node = self.make(NodeType.OTHER, ts)
        parent.add_child(node)
        for child in ts.named_children:
            self.convert(child, node)

    def selector(self, ts: TSNode) -> Node:
        node = self.make(NodeType.SELECTOR, ts)
        for compound in _compounds(ts):
            simple = node.add_child(self.make_range(NodeType.SIMPLE_SELECTOR, compound.start, compound.end))
            for start, end in compound.pseudos:
                simple.add_child(self.make_range(NodeType.PSEUDO_SELECTOR, start, end))
        return node


def _is_known_at_rule(name: str) -> bool:
    name = name.lower()
    return name in _KNOWN_AT_RULES or name.endswith("keyframes")


def _prefix(ts: TSNode) -> TSNode | None:
    """The selector a compound part is attached to, if any."""
    if not ts.children:
        return None
    first = ts.children[0]
    if first.is_named and first.type in _SELECTOR_TYPES:
        return first
    return None


def _pseudo_start(ts: TSNode, prefix: TSNode | None) -> int:
    """Byte offset of the ':' or '::' that opens a pseudo selector."""
    operator = _PSEUDO_TYPES[ts.type]
    rest = ts.children[1:] if prefix is not None else ts.children
    token = next((c for c in rest if c.type == operator), None)
    if token is not None:
        return token.start_byte
    return prefix.end_byte if prefix is not None else ts.start_byte


def _compounds(ts: TSNode) -> list[_Compound]:
    """Split a complex selector into compounds, in source order.

    A trailing class, id, attribute or pseudo part wraps everything
    before it, combinators included ("ul a:hover" is ":hover" applied to
    "ul a"), so it extends the last compound of its prefix.
    """
    if ts.type in _COMBINATORS:
        named = [c for c in ts.named_children if c.type != "comment"]
        if len(named) >= 2:
            return _compounds(named[0]) + _compounds(named[-1])
        return [_Compound(ts.start_byte, ts.end_byte)]

    if ts.type not in _PREFIXED:
        return [_Compound(ts.start_byte, ts.end_byte)]

    prefix = _prefix(ts)
    if prefix is None:
        compounds = [_Compound(ts.start_byte, ts.end_byte)]
    else:
        compounds = _compounds(prefix)
        compounds[-1].end = ts.end_byte
    if ts.type in _PSEUDO_TYPES:
        compounds[-1].pseudos.append((_pseudo_start(ts, prefix), ts.end_byte))
    return compounds


def parse_stylesheet(text: str) -> Node:
    """Parse CSS text into a stylesheet node tree.

    Syntax errors never raise; unparseable regions become OTHER nodes.
    """
    data = text.encode("utf-8")
    tree = _get_parser().parse(data)
    builder = _TreeBuilder(text, data)
    root = Node(type=NodeType.STYLESHEET, offset=0, end=len(text), text=text)
    for child in tree.root_node.named_children:
        builder.convert(child, root)
    if tree.root_node.has_error:
        logger.debug("Stylesheet parsed with errors (%d chars)", len(text))
    return root
