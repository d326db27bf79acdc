"""Tests for mode predicates and extra detectors."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from identspell.document import Document, Token
from identspell.predicates import (
    MarkdownPredicate, MarkupDetector, ModePredicateRegistry, OutlineDetector,
    RangeSet, UserPredicate,
)


def token_for(doc, word):
    pos = doc.text.index(word)
    return Token(word, pos, pos + len(word))


def test_range_set_merges_and_looks_up():
    ranges = RangeSet([(10, 20), (0, 5), (15, 30), (40, 40)])
    assert len(ranges) == 2
    assert 0 in ranges
    assert 4 in ranges
    assert 5 not in ranges
    assert 25 in ranges
    assert 30 not in ranges
    assert 40 not in ranges
    assert -1 not in ranges


def test_markdown_code_urls_and_links():
    text = (
        "Intro paragraph\n"
        "```python\n"
        "fenced_code = 1\n"
        "```\n"
        "See https://example.com/pathh and [label](docs/targett.md).\n"
    )
    doc = Document(text, path="README.md")
    predicate = MarkdownPredicate()
    assert predicate.check(doc, token_for(doc, "Intro")) is True
    assert predicate.check(doc, token_for(doc, "fenced")) is False
    assert predicate.check(doc, token_for(doc, "pathh")) is False
    assert predicate.check(doc, token_for(doc, "targett")) is False
    assert predicate.check(doc, token_for(doc, "label")) is True


def test_ranges_cached_per_revision():
    doc = Document("`code` text\n", path="README.md")
    predicate = MarkdownPredicate()
    predicate.check(doc, token_for(doc, "text"))
    assert len(doc.cache) == 1
    doc.set_text("text `code`\n")
    assert doc.cache == {}
    assert predicate.check(doc, token_for(doc, "text")) is True
    assert predicate.check(doc, token_for(doc, "code")) is False


def test_markup_detector():
    text = '<a href="#" title="Helpfull link">Clik here</a> {{ user_nmae }} &nbsp;\n'
    doc = Document(text, path="page.html")
    detector = MarkupDetector()
    assert detector.check(doc, token_for(doc, "href")) is False
    assert detector.check(doc, token_for(doc, "title")) is False
    assert detector.check(doc, token_for(doc, "Helpfull")) is True
    assert detector.check(doc, token_for(doc, "Clik")) is True
    assert detector.check(doc, token_for(doc, "user")) is False
    assert detector.check(doc, token_for(doc, "nbsp")) is False


def test_markup_detector_skips_script_blocks():
    text = "<script>var fooo = 1;</script><p>Texte</p>\n"
    doc = Document(text, path="page.html")
    detector = MarkupDetector()
    assert detector.check(doc, token_for(doc, "fooo")) is False
    assert detector.check(doc, token_for(doc, "Texte")) is True


def test_markup_detector_covers_template_modes():
    detector = MarkupDetector()
    for path in ("App.vue", "feed.xml", "base.jinja"):
        doc = Document("<section>Wellcome {{ titel }}</section>\n", path=path)
        assert detector.check(doc, token_for(doc, "section")) is False
        assert detector.check(doc, token_for(doc, "titel")) is False
        assert detector.check(doc, token_for(doc, "Wellcome")) is True


def test_markup_detector_only_for_markup_modes():
    doc = Document("<div>x</div>\n", path="notes.txt")
    assert MarkupDetector().check(doc, token_for(doc, "div")) is None


def test_outline_detector():
    text = (
        "#+TITLE: Projet notes\n"
        "Some =verbatm= and ~cde~ words.\n"
        ":PROPERTIES:\n"
        ":CUSTOM_ID: secion\n"
        ":END:\n"
        "#+BEGIN_SRC python\n"
        "undefned_name()\n"
        "#+END_SRC\n"
        "[[https://example.org][Linkk]]\n"
    )
    doc = Document(text, path="todo.org")
    detector = OutlineDetector()
    assert detector.check(doc, token_for(doc, "TITLE")) is False
    assert detector.check(doc, token_for(doc, "Projet")) is True
    assert detector.check(doc, token_for(doc, "verbatm")) is False
    assert detector.check(doc, token_for(doc, "cde")) is False
    assert detector.check(doc, token_for(doc, "words")) is True
    assert detector.check(doc, token_for(doc, "secion")) is False
    assert detector.check(doc, token_for(doc, "undefned")) is False
    assert detector.check(doc, token_for(doc, "example")) is False
    assert detector.check(doc, token_for(doc, "Linkk")) is True


def test_registry_lookup_and_ignore():
    registry = ModePredicateRegistry({"markdown": MarkdownPredicate()}, ignored={"typescript"})
    registry.register("typescript", MarkdownPredicate())
    assert registry.lookup("markdown") is not None
    assert registry.lookup("typescript") is None
    assert registry.lookup("python") is None
    doc = Document("x = 1\n", path="a.py")
    assert registry.check(doc, token_for(doc, "x")) is None


def test_user_predicate():
    predicate = UserPredicate(lambda word: not word.startswith("TODO"))
    doc = Document("TODOs remain\n", path="notes.txt")
    assert predicate.check(doc, token_for(doc, "TODOs")) is False
    assert predicate.check(doc, token_for(doc, "remain")) is True
