"""Tests for csslens.lsp.facts."""

import json

import pytest
from lsprotocol import types as lsp

from csslens.lsp.facts import (
    CSSDataManager,
    DataProvider,
    Entry,
    entry_from_dict,
    get_browser_label,
    parse_browsers,
)


class TestBrowserLabel:
    def test_list_with_versions(self):
        assert get_browser_label(["E12", "FF3.6", "S4", "C1", "IE9", "O10.5"]) == (
            "Edge 12, Firefox 3.6, Safari 4, Chrome 1, IE 9, Opera 10.5"
        )

    def test_comma_separated_string(self):
        assert get_browser_label("E,FF4,C") == "Edge, Firefox 4, Chrome"

    def test_canonical_order(self):
        assert get_browser_label(["C1", "E12"]) == "Edge 12, Chrome 1"

    def test_input_order_does_not_matter(self):
        assert get_browser_label("O15,S3,C1") == get_browser_label(["S3", "C1", "O15"]) == "Safari 3, Chrome 1, Opera 15"

    def test_unknown_codes_ignored(self):
        assert get_browser_label("E,F,S,C,IJ") == "Edge, Safari, Chrome"

    def test_empty(self):
        assert get_browser_label(None) is None
        assert get_browser_label([]) is None
        assert get_browser_label("") is None

    def test_only_unknown(self):
        assert get_browser_label(["XX1"]) is None

    def test_parse_browsers(self):
        assert parse_browsers(" E12 , FF1,") == ("E12", "FF1")
        assert parse_browsers(["C1"]) == ("C1",)
        assert parse_browsers(None) == ()


class TestEntryFromDict:
    def test_plain_description(self):
        entry = entry_from_dict({"name": "color", "description": "Text color.", "browsers": ["C1"]})
        assert entry == Entry(name="color", description="Text color.", browsers=("C1",))

    def test_markup_description(self):
        entry = entry_from_dict({"name": "gap", "description": {"kind": "markdown", "value": "**gutters**"}})
        assert entry.description == lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value="**gutters**")

    def test_unknown_markup_kind_falls_back_to_plaintext(self):
        entry = entry_from_dict({"name": "gap", "description": {"kind": "rst", "value": "x"}})
        assert entry.description.kind == lsp.MarkupKind.PlainText

    def test_missing_description(self):
        assert entry_from_dict({"name": "zoom"}).description == ""

    def test_missing_name(self):
        assert entry_from_dict({"description": "orphan"}) is None


class TestCSSDataManager:
    @pytest.fixture
    def manager(self):
        return CSSDataManager()

    def test_is_data_provider(self, manager):
        assert isinstance(manager, DataProvider)

    def test_bundled_property(self, manager):
        entry = manager.get_property("color")
        assert entry is not None
        assert entry.name == "color"
        assert "E12" in entry.browsers

    def test_case_insensitive(self, manager):
        assert manager.get_property("COLOR") is manager.get_property("color")
        assert manager.get_pseudo_class(":HOVER") is manager.get_pseudo_class(":hover")

    def test_vendor_prefixed_property(self, manager):
        assert manager.get_property("-webkit-appearance") is not None
        assert manager.get_property("appearance") is None

    def test_at_directive(self, manager):
        assert manager.get_at_directive("@font-face") is not None
        assert manager.get_at_directive("font-face") is None

    def test_pseudo_arguments_ignored(self, manager):
        assert manager.get_pseudo_class(":nth-child(2n+1)") is manager.get_pseudo_class(":nth-child")
        assert manager.get_pseudo_class(":not(.a)") is not None

    def test_pseudo_element(self, manager):
        assert manager.get_pseudo_element("::before") is not None
        assert manager.get_pseudo_element(":before") is None

    def test_without_default_data(self):
        manager = CSSDataManager(use_default_data=False)
        assert manager.get_property("color") is None
        assert manager.get_properties() == []

    def test_custom_data_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "properties": [{"name": "color", "description": "Overridden."}],
            "atDirectives": [{"name": "@tailwind", "description": "Tailwind directive."}],
            "pseudoClasses": [{"description": "no name"}, "not an object"],
        }))
        manager = CSSDataManager([path])
        assert manager.get_property("color").description == "Overridden."
        assert manager.get_at_directive("@tailwind").description == "Tailwind directive."
        assert manager.get_property("display") is not None

    def test_unreadable_custom_data_is_skipped(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        manager = CSSDataManager([broken, tmp_path / "missing.json"])
        assert manager.get_property("color") is not None
        assert manager.add_data_file(broken) is False

    def test_non_object_custom_data(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        assert CSSDataManager(use_default_data=False).add_data_file(path) is False

    def test_listing(self, manager):
        names = {e.name for e in manager.get_pseudo_elements()}
        assert {"::before", "::after"} <= names
        assert manager.get_at_directives()
        assert manager.get_pseudo_classes()
