"""Tests for the category classifier adapter."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from identspell.categories import CategoryClassifier, PlainTextPolicy
from identspell.config import Config


def make_classifier(policy=PlainTextPolicy.PROSE, extra=()):
    return CategoryClassifier({"comment", "string"}, extra, policy)


def test_single_category():
    c = make_classifier()
    assert c.is_checkable("comment")
    assert c.is_checkable("string")
    assert not c.is_checkable("keyword")


def test_category_set_intersection():
    c = make_classifier()
    assert c.is_checkable({"keyword", "comment"})
    assert not c.is_checkable({"keyword", "builtin"})
    assert c.is_checkable(["bold", "string"])


def test_user_extension_set():
    c = make_classifier(extra={"markdown-header"})
    assert c.is_checkable("markdown-header")
    assert c.is_checkable({"markdown-header", "bold"})


def test_plain_text_policies():
    never = make_classifier(PlainTextPolicy.NEVER)
    assert not never.is_checkable(None, prose=True)
    assert not never.is_checkable(None, prose=False)

    prose = make_classifier(PlainTextPolicy.PROSE)
    assert prose.is_checkable(None, prose=True)
    assert not prose.is_checkable(None, prose=False)

    source = make_classifier(PlainTextPolicy.SOURCE)
    assert not source.is_checkable(None, prose=True)
    assert source.is_checkable(None, prose=False)

    always = make_classifier(PlainTextPolicy.ALWAYS)
    assert always.is_checkable(None, prose=True)
    assert always.is_checkable(None, prose=False)


def test_empty_set_counts_as_plain_text():
    c = make_classifier(PlainTextPolicy.ALWAYS)
    assert c.is_checkable(set())


def test_from_config():
    config = Config(load=False)
    config.override("plain_text_policy", "never")
    config.override("extra_categories", ["heading"])
    c = CategoryClassifier.from_config(config)
    assert c.is_checkable("comment")
    assert c.is_checkable("heading")
    assert not c.is_checkable(None)
