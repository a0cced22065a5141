"""Tests for option coercion."""

import logging

from activedict import ActiveDictionary, Options
from activedict.options import coerce_options


class TestCoerceOptions:
    def test_none(self):
        assert coerce_options(None).handle_item_changes is False

    def test_bool_shorthand(self):
        assert coerce_options(True).handle_item_changes is True
        assert coerce_options(False).handle_item_changes is False

    def test_mapping(self):
        assert coerce_options({"handle_item_changes": True}).handle_item_changes is True
        assert coerce_options({"handleItemChanges": True}).handle_item_changes is True
        assert coerce_options({}).handle_item_changes is False

    def test_only_literal_true_enables(self):
        assert coerce_options({"handle_item_changes": 1}).handle_item_changes is False
        assert coerce_options({"handle_item_changes": "yes"}).handle_item_changes is False

    def test_options_instance(self):
        assert coerce_options(Options(True)).handle_item_changes is True

    def test_malformed_means_defaults(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="activedict.options"):
            opts = coerce_options(42)
        assert opts.handle_item_changes is False
        assert any("Ignoring" in r.message for r in caplog.records)

    def test_dictionary_accepts_malformed_options(self):
        d = ActiveDictionary({"a": 1}, ["nonsense"])
        assert d.handle_item_changes is False
        assert d.get("a") == 1
