"""Hover content for stylesheet documents."""

from __future__ import annotations

import logging
from typing import Callable, Union

from lsprotocol import types as lsp

from . import facts
from .document import TextDocument
from .nodes import Node, NodeType, get_node_path
from .selector_printing import selector_to_marked_string, simple_selector_to_marked_string

logger = logging.getLogger(__name__)

HoverContents = Union[
    str,
    lsp.MarkupContent,
    lsp.MarkedStringWithLanguage,
    list[Union[str, lsp.MarkedStringWithLanguage]],
]


def finalize_contents(contents: HoverContents, supports_markdown: bool) -> HoverContents:
    """Reduce hover contents to plain text unless the client renders markdown.

    Always returns a new value for rich input; plain input is returned as is,
    so converting twice gives the same result as converting once.
    """
    if supports_markdown:
        return contents
    if isinstance(contents, str):
        return contents
    if isinstance(contents, lsp.MarkupContent):
        return lsp.MarkupContent(kind=lsp.MarkupKind.PlainText, value=contents.value)
    if isinstance(contents, list):
        return [c if isinstance(c, str) else c.value for c in contents]
    return contents.value


class CSSHover:
    """Compute hovers for a single client session.

    Whether the client renders markdown is resolved from its capabilities
    on first use and kept for the lifetime of the instance.
    """

    def __init__(
        self,
        client_capabilities: lsp.ClientCapabilities | None = None,
        data: facts.DataProvider | None = None,
    ):
        self.client_capabilities = client_capabilities
        self.data = data or facts.default_data_manager()
        self._supports_markdown: bool | None = None
        # Innermost match wins; add a row to support another node kind.
        self._handlers: dict[NodeType, Callable[[Node], HoverContents | None]] = {
            NodeType.SELECTOR: self._hover_selector,
            NodeType.SIMPLE_SELECTOR: self._hover_simple_selector,
            NodeType.DECLARATION: self._hover_declaration,
            NodeType.UNKNOWN_AT_RULE: self._hover_at_rule,
            NodeType.PSEUDO_SELECTOR: self._hover_pseudo_selector,
        }

    def do_hover(self, document: TextDocument, position: lsp.Position, stylesheet: Node) -> lsp.Hover | None:
        offset = document.offset_at(position)
        nodepath = get_node_path(stylesheet, offset)

        hover: lsp.Hover | None = None
        for node in nodepath:
            handler = self._handlers.get(node.type)
            if handler is None:
                continue
            contents = handler(node)
            if contents is None:
                continue
            logger.debug("Hover from %s node %r", node.type.value, node.get_text())
            hover = lsp.Hover(
                contents=contents,
                range=lsp.Range(
                    start=document.position_at(node.offset),
                    end=document.position_at(node.end),
                ),
            )

        if hover is not None:
            hover.contents = self.convert_contents(hover.contents)
        return hover

    def _hover_selector(self, node: Node) -> HoverContents | None:
        return selector_to_marked_string(node)

    def _hover_simple_selector(self, node: Node) -> HoverContents | None:
        # Sass at-rules such as "@at-root" parse as simple selectors.
        if node.get_text().startswith("@"):
            return None
        return simple_selector_to_marked_string(node)

    def _hover_declaration(self, node: Node) -> HoverContents | None:
        entry = self.data.get_property(node.get_full_property_name())
        if entry is None:
            return None
        if not isinstance(entry.description, str):
            return entry.description

        contents: list[str | lsp.MarkedStringWithLanguage] = []
        if entry.description:
            contents.append(entry.description)
        browser_label = facts.get_browser_label(entry.browsers)
        if browser_label:
            contents.append(browser_label)
        return contents or None

    def _hover_at_rule(self, node: Node) -> HoverContents | None:
        entry = self.data.get_at_directive(node.name or node.get_text())
        if entry is None:
            return None
        return entry.description

    def _hover_pseudo_selector(self, node: Node) -> HoverContents | None:
        name = node.get_text()
        if name[:2] == "::":
            entry = self.data.get_pseudo_element(name)
        else:
            entry = self.data.get_pseudo_class(name)
        if entry is None:
            return None
        return entry.description

    def convert_contents(self, contents: HoverContents) -> HoverContents:
        return finalize_contents(contents, self.supports_markdown())

    def supports_markdown(self) -> bool:
        if self._supports_markdown is None:
            self._supports_markdown = _resolve_markdown_support(self.client_capabilities)
            logger.debug("Client markdown support: %s", self._supports_markdown)
        return self._supports_markdown


def _resolve_markdown_support(capabilities: lsp.ClientCapabilities | None) -> bool:
    if capabilities is None:
        return True
    text_document = getattr(capabilities, "text_document", None)
    hover = getattr(text_document, "hover", None) if text_document is not None else None
    content_format = getattr(hover, "content_format", None) if hover is not None else None
    return isinstance(content_format, list) and lsp.MarkupKind.Markdown in content_format
