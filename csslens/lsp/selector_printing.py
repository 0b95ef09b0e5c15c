"""Render selectors as a sketch of the HTML elements they match."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from lsprotocol import types as lsp

from .nodes import Node, NodeType

_PART_RE = re.compile(r'''
    (?P<tag>^(?:[\w-]+|\*))
    |\#(?P<id>[\w-]+)
    |\.(?P<cls>[\w-]+)
    |\[\s*(?P<attr>[^\]=~|^$*\s]+)\s*(?:[~|^$*]?=\s*(?P<val>[^\]]*?)\s*)?\]
    |(?P<pseudo>::?[\w-]+(?:\([^)]*\))?)
''', re.VERBOSE)

_ELLIPSIS = "…"
_INDENT = "  "


@dataclass
class Element:
    """An element sketched from a compound selector."""

    name: str = "element"
    attributes: list[tuple[str, str | None]] = field(default_factory=list)

    def add_attribute(self, name: str, value: str | None):
        # Repeated classes collapse into one space separated attribute.
        for i, (existing, old) in enumerate(self.attributes):
            if existing == name and value is not None and old is not None:
                self.attributes[i] = (name, f"{old} {value}")
                return
        self.attributes.append((name, value))

    def start_tag(self) -> str:
        parts = [self.name]
        for name, value in self.attributes:
            parts.append(name if value is None else f'{name}="{value}"')
        return f"<{' '.join(parts)}>"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def to_element(text: str) -> Element:
    """Sketch the element matched by a compound selector such as ``a.x:hover``."""
    element = Element()
    for m in _PART_RE.finditer(text.strip()):
        if m.group("tag"):
            if m.group("tag") != "*":
                element.name = m.group("tag")
        elif m.group("id"):
            element.add_attribute("id", m.group("id"))
        elif m.group("cls"):
            element.add_attribute("class", m.group("cls"))
        elif m.group("attr"):
            value = m.group("val")
            element.add_attribute(m.group("attr"), _unquote(value) if value is not None else "")
        elif m.group("pseudo"):
            element.add_attribute(m.group("pseudo"), None)
    return element


def selector_chain(node: Node) -> list[tuple[str, Element]]:
    """Pair each compound of a complex selector with the combinator before it.

    The first compound gets an empty combinator; a descendant combinator
    is reported as a single space.
    """
    simples = [c for c in node.children if c.type == NodeType.SIMPLE_SELECTOR]
    if not simples:
        return [("", to_element(node.get_text()))]

    text = node.get_text()
    chain = []
    previous_end = None
    for simple in simples:
        combinator = ""
        if previous_end is not None:
            between = text[previous_end - node.offset:simple.offset - node.offset].strip()
            combinator = between[:1] or " "
        chain.append((combinator, to_element(simple.get_text())))
        previous_end = simple.end
    return chain


def _print_chain(chain: list[tuple[str, Element]]) -> str:
    lines = []
    depth = 0
    for i, (combinator, element) in enumerate(chain):
        if i > 0:
            if combinator == ">":
                depth += 1
            elif combinator == "~":
                lines.append(_INDENT * depth + _ELLIPSIS)
            elif combinator != "+":
                depth += 1
                lines.append(_INDENT * depth + _ELLIPSIS)
                depth += 1
        lines.append(_INDENT * depth + element.start_tag())
    return "\n".join(lines)


def selector_to_marked_string(node: Node) -> lsp.MarkedStringWithLanguage:
    """Hover content for a complete selector."""
    return lsp.MarkedStringWithLanguage(language="html", value=_print_chain(selector_chain(node)))


def simple_selector_to_marked_string(node: Node) -> lsp.MarkedStringWithLanguage:
    """Hover content for one compound selector."""
    return lsp.MarkedStringWithLanguage(language="html", value=to_element(node.get_text()).start_tag())
