"""CSS documentation data: properties, at-rules and pseudo selectors."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from lsprotocol import types as lsp

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "css_data.json"

# Canonical order used when building browser labels.
BROWSER_NAMES = {
    "E": "Edge",
    "FF": "Firefox",
    "S": "Safari",
    "C": "Chrome",
    "IE": "IE",
    "O": "Opera",
}

_BROWSER_RE = re.compile(r'^([A-Z]+)(\d+(?:\.\d+)*)?$')
_PSEUDO_ARGS_RE = re.compile(r'\(.*$', re.DOTALL)


@dataclass(frozen=True)
class Entry:
    """Documentation for a single property, at-rule or pseudo selector."""

    name: str
    description: str | lsp.MarkupContent = ""
    browsers: tuple[str, ...] = ()
    references: tuple[dict, ...] = field(default=(), repr=False)


@runtime_checkable
class DataProvider(Protocol):
    """Interface for documentation lookups (allows DI for testing)."""

    def get_property(self, name: str) -> Entry | None: ...
    def get_at_directive(self, name: str) -> Entry | None: ...
    def get_pseudo_class(self, name: str) -> Entry | None: ...
    def get_pseudo_element(self, name: str) -> Entry | None: ...


def parse_browsers(browsers: str | list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
    """Normalize browser data to a tuple of codes.

    Accepts either a list (``["FF3.6", "C"]``) or the comma separated
    form (``"E,FF3.6,C"``).
    """
    if not browsers:
        return ()
    if isinstance(browsers, str):
        browsers = browsers.split(",")
    return tuple(b.strip() for b in browsers if b and b.strip())


def get_browser_label(browsers: str | list[str] | tuple[str, ...] | None) -> str | None:
    """Build a human readable label such as ``"Edge 12, Firefox 3.6"``.

    Browsers appear in ``BROWSER_NAMES`` order, not in the order given.
    Returns None when no known browser is listed.
    """
    versions: dict[str, str] = {}
    for code in parse_browsers(browsers):
        m = _BROWSER_RE.match(code)
        if not m or m.group(1) not in BROWSER_NAMES:
            continue
        versions.setdefault(m.group(1), m.group(2) or "")

    parts = []
    for code, name in BROWSER_NAMES.items():
        if code not in versions:
            continue
        version = versions[code]
        parts.append(f"{name} {version}" if version else name)

    if not parts:
        return None
    return ", ".join(parts)


def _parse_description(raw) -> str | lsp.MarkupContent:
    if isinstance(raw, dict):
        kind = raw.get("kind", lsp.MarkupKind.PlainText.value)
        try:
            markup_kind = lsp.MarkupKind(kind)
        except ValueError:
            markup_kind = lsp.MarkupKind.PlainText
        return lsp.MarkupContent(kind=markup_kind, value=str(raw.get("value", "")))
    if raw is None:
        return ""
    return str(raw)


def entry_from_dict(data: dict) -> Entry | None:
    """Build an Entry from one custom data record, or None if it has no name."""
    name = data.get("name")
    if not isinstance(name, str) or not name:
        return None
    references = data.get("references") or ()
    return Entry(
        name=name,
        description=_parse_description(data.get("description")),
        browsers=parse_browsers(data.get("browsers")),
        references=tuple(r for r in references if isinstance(r, dict)),
    )


def _lookup_key(name: str) -> str:
    return name.strip().lower()


def _pseudo_key(name: str) -> str:
    # ":nth-child(2n+1)" is documented as ":nth-child"
    return _lookup_key(_PSEUDO_ARGS_RE.sub("", name))


class CSSDataManager:
    """Documentation source backed by custom data JSON files.

    The file format is the one editors use for CSS custom data: an object
    with ``properties``, ``atDirectives``, ``pseudoClasses`` and
    ``pseudoElements`` lists. Later data overrides earlier data for the
    same name.
    """

    def __init__(self, data_paths: list[Path | str] | None = None, use_default_data: bool = True):
        self._properties: dict[str, Entry] = {}
        self._at_directives: dict[str, Entry] = {}
        self._pseudo_classes: dict[str, Entry] = {}
        self._pseudo_elements: dict[str, Entry] = {}
        if use_default_data:
            self.add_data(json.loads(DEFAULT_DATA_PATH.read_text(encoding="utf-8")))
        for path in data_paths or []:
            self.add_data_file(path)

    def add_data_file(self, path: Path | str) -> bool:
        """Load a custom data file. Returns False if it could not be loaded."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Could not load custom data from %s", path, exc_info=True)
            return False
        if not isinstance(data, dict):
            logger.warning("Ignoring custom data %s: top level is not an object", path)
            return False
        self.add_data(data)
        return True

    def add_data(self, data: dict):
        """Merge one custom data object into the tables."""
        tables = (
            ("properties", self._properties, _lookup_key),
            ("atDirectives", self._at_directives, _lookup_key),
            ("pseudoClasses", self._pseudo_classes, _pseudo_key),
            ("pseudoElements", self._pseudo_elements, _pseudo_key),
        )
        for section, table, key in tables:
            for raw in data.get(section) or []:
                if not isinstance(raw, dict):
                    continue
                entry = entry_from_dict(raw)
                if entry is None:
                    logger.debug("Skipping %s record without a name", section)
                    continue
                table[key(entry.name)] = entry

    def get_property(self, name: str) -> Entry | None:
        return self._properties.get(_lookup_key(name))

    def get_at_directive(self, name: str) -> Entry | None:
        return self._at_directives.get(_lookup_key(name))

    def get_pseudo_class(self, name: str) -> Entry | None:
        return self._pseudo_classes.get(_pseudo_key(name))

    def get_pseudo_element(self, name: str) -> Entry | None:
        return self._pseudo_elements.get(_pseudo_key(name))

    def get_properties(self) -> list[Entry]:
        return list(self._properties.values())

    def get_at_directives(self) -> list[Entry]:
        return list(self._at_directives.values())

    def get_pseudo_classes(self) -> list[Entry]:
        return list(self._pseudo_classes.values())

    def get_pseudo_elements(self) -> list[Entry]:
        return list(self._pseudo_elements.values())


_default_manager: CSSDataManager | None = None


def default_data_manager() -> CSSDataManager:
    """Shared manager holding only the bundled data."""
    global _default_manager
    if _default_manager is None:
        _default_manager = CSSDataManager()
    return _default_manager
