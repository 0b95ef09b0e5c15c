"""
csslens: documentation hovers for CSS

Provides three interfaces:
1. CLI: `csslens hover styles.css 0 12`
2. LSP / MCP servers: `csslens lsp`, `csslens mcp`
3. Library: `import csslens; csslens.hover("a:hover { color: red; }", 0, 12)`
"""

from typing import Optional

from lsprotocol import converters
from lsprotocol import types as lsp_types

from .lsp.document import TextDocument
from .lsp.facts import CSSDataManager, Entry, default_data_manager, get_browser_label
from .lsp.hover import CSSHover, finalize_contents
from .lsp.parser import parse_stylesheet

try:
    from importlib.metadata import version
    __version__ = version("csslens")
except Exception:
    __version__ = "unknown"

__all__ = [
    "hover",
    "describe",
    "plaintext_capabilities",
    "CSSHover",
    "CSSDataManager",
    "TextDocument",
    "finalize_contents",
    "parse_stylesheet",
]

KINDS = ("property", "at-rule", "pseudo")

_converter = converters.get_converter()


def plaintext_capabilities() -> lsp_types.ClientCapabilities:
    """Capabilities of a client that only renders plain text hovers."""
    return lsp_types.ClientCapabilities(
        text_document=lsp_types.TextDocumentClientCapabilities(
            hover=lsp_types.HoverClientCapabilities(content_format=[lsp_types.MarkupKind.PlainText]),
        ),
    )


def _data(data_paths: Optional[list[str]]) -> CSSDataManager:
    if data_paths:
        return CSSDataManager(data_paths)
    return default_data_manager()


def hover(
    source: str,
    line: int,
    character: int,
    markdown: bool = True,
    data_paths: Optional[list[str]] = None,
) -> Optional[dict]:
    """Compute the hover for a position in a stylesheet

    Args:
        source: Stylesheet text
        line: Zero based line
        character: Zero based character within the line
        markdown: Whether rich content may be returned (default True)
        data_paths: Optional custom data JSON files to load in addition
            to the bundled documentation

    Returns:
        dict with "contents" and "range" in LSP wire format, or None

    Example:
        >>> result = hover("a:hover { color: red; }", 0, 11)
        >>> result["range"]
        {'start': {'line': 0, 'character': 10}, 'end': {'line': 0, 'character': 21}}
    """
    capabilities = None if markdown else plaintext_capabilities()
    service = CSSHover(capabilities, _data(data_paths))
    document = TextDocument(source)
    result = service.do_hover(document, lsp_types.Position(line=line, character=character), parse_stylesheet(source))
    if result is None:
        return None
    return _converter.unstructure(result)


def _lookup(data: CSSDataManager, kind: str, name: str) -> Optional[Entry]:
    if kind == "property":
        return data.get_property(name)
    if kind == "at-rule":
        if not name.startswith("@"):
            name = "@" + name
        return data.get_at_directive(name)
    if kind == "pseudo":
        if name.startswith("::"):
            return data.get_pseudo_element(name)
        if not name.startswith(":"):
            name = ":" + name
        return data.get_pseudo_class(name)
    raise ValueError(f"Unknown kind {kind!r}, expected one of {', '.join(KINDS)}")


def describe(kind: str, name: str, data_paths: Optional[list[str]] = None) -> Optional[dict]:
    """Look up the documentation for a property, at-rule or pseudo selector

    Args:
        kind: "property", "at-rule" or "pseudo"
        name: Name to look up (e.g., "color", "@font-face", "::before")
        data_paths: Optional custom data JSON files

    Returns:
        dict with name, description, browsers, browser_label and
        references, or None if the name is not documented

    Example:
        >>> describe("pseudo", "::before")["name"]
        '::before'
    """
    entry = _lookup(_data(data_paths), kind, name)
    if entry is None:
        return None
    description = entry.description
    if not isinstance(description, str):
        description = _converter.unstructure(description)
    return {
        "name": entry.name,
        "description": description,
        "browsers": list(entry.browsers),
        "browser_label": get_browser_label(entry.browsers),
        "references": list(entry.references),
    }
