"""Tests for the word acceptance pipeline."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from identspell.backend import Backend, BackendVerdict
from identspell.categories import CategoryClassifier, PlainTextPolicy
from identspell.document import Document, Token
from identspell.pipeline import Finding, VerdictKind, WordAcceptancePipeline
from identspell.predicates import ModePredicateRegistry, UserPredicate, default_mode_predicates

DICTIONARY = {
    "hello", "world", "there", "greeting", "correct", "variable", "value",
    "the", "cat", "we've", "we", "done", "it", "import", "some", "code", "parser",
}


class StubBackend(Backend):
    """Dictionary-backed backend that records every call."""
    name = "stub"

    def __init__(self, words=DICTIONARY):
        self.words = {w.lower() for w in words}
        self.calls = []

    def check_words(self, words):
        self.calls.append(list(words))
        return [BackendVerdict(w, w.lower() not in self.words) for w in words]


def make_pipeline(backend=None, **kwargs):
    backend = backend or StubBackend()
    classifier = CategoryClassifier(
        {"comment", "string", "doc", "function-name", "variable-name", "type-name"},
        (), kwargs.pop("policy", PlainTextPolicy.PROSE),
    )
    kwargs.setdefault("mode_predicates", default_mode_predicates())
    return WordAcceptancePipeline(backend, classifier, **kwargs)


def token_for(doc, word, occurrence=1):
    pos = -1
    for _ in range(occurrence):
        pos = doc.text.index(word, pos + 1)
    return Token(word, pos, pos + len(word))


def test_uncheckable_category_skips_backend():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("import helle\n", path="mod.py")
    assert not p.should_check(doc, doc.text.index("helle"))
    assert backend.calls == []


def test_short_word_rejected():
    p = make_pipeline()
    doc = Document("a b", path="notes.txt")
    assert not p.accepts(doc, Token("a", 0, 1))


def test_token_outside_buffer_rejected():
    p = make_pipeline()
    doc = Document("hello", path="notes.txt")
    assert not p.accepts(doc, Token("hello", 3, 8))


def test_compound_identifier_with_typo():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("correcVariable = 1\ncorrectVariable = 2\n", path="vars.py")
    assert p.should_check(doc, 0)
    assert backend.calls[-1] == ["correc", "Variable"]
    assert not p.should_check(doc, doc.text.index("correctVariable"))


def test_compound_drops_short_and_numeric_sub_words():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("# myParser x1\n", path="a.py")
    # "my" is too short, only "Parser" reaches the backend
    assert not p.confirm(doc, token_for(doc, "myParser"))
    assert backend.calls == [["Parser"]]
    # nothing checkable left
    assert not p.confirm(doc, token_for(doc, "x1"))
    assert len(backend.calls) == 1


def test_single_word_keeps_host_verdict_without_backend():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("# helle\n", path="a.py")
    assert p.confirm(doc, token_for(doc, "helle"))
    assert backend.calls == []


def test_camel_case_can_be_disabled():
    p = make_pipeline(camel_case_enabled=False)
    doc = Document("correctVariable = 2\n", path="vars.py")
    assert p.confirm(doc, token_for(doc, "correctVariable"))


def test_non_ascii_word_is_not_split():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("# caféBar cafeBar\n", path="a.py")
    assert not p.is_compound("caféBar")
    assert p.confirm(doc, token_for(doc, "caféBar"))
    assert backend.calls == []
    # the ASCII spelling is split and its sub-words checked
    assert p.is_compound("cafeBar")
    assert p.confirm(doc, token_for(doc, "cafeBar"))
    assert backend.calls == [["cafe", "Bar"]]

    backend.calls.clear()
    found = doc.scan(p)
    assert backend.calls[0] == ["caféBar", "cafeBar"]
    assert [f.word for f in found] == ["caféBar", "cafeBar"]


def test_apostrophe_quirk_clears_contraction():
    backend = StubBackend()
    p = make_pipeline(backend)
    doc = Document("We've done it\n", path="notes.txt")
    ve = token_for(doc, "ve")
    assert p.accepts(doc, ve)
    assert not p.confirm(doc, ve)
    assert backend.calls == [["We've"]]


def test_apostrophe_quirk_keeps_real_typo():
    p = make_pipeline()
    doc = Document("Wx've done it\n", path="notes.txt")
    assert p.confirm(doc, token_for(doc, "ve"))


def test_apostrophe_quirk_can_be_disabled():
    p = make_pipeline(apostrophe_quirk_enabled=False)
    doc = Document("We've done it\n", path="notes.txt")
    assert p.confirm(doc, token_for(doc, "ve"))


def test_user_predicate_has_final_say():
    p = make_pipeline(extra_predicate=lambda word: word != "helle")
    assert isinstance(p.user_predicate, UserPredicate)
    doc = Document("# helle wrold\n", path="a.py")
    assert not p.confirm(doc, token_for(doc, "helle"))
    assert p.confirm(doc, token_for(doc, "wrold"))


def test_user_predicate_not_reached_when_compound_is_fine():
    seen = []
    p = make_pipeline(extra_predicate=lambda word: seen.append(word) or True)
    doc = Document("correctVariable = 2\n", path="vars.py")
    assert not p.confirm(doc, token_for(doc, "correctVariable"))
    assert seen == []


def test_mode_predicate_skips_inline_code():
    p = make_pipeline()
    doc = Document("Some `helle` code\n", path="README.md")
    assert not p.accepts(doc, token_for(doc, "helle"))
    assert p.accepts(doc, token_for(doc, "Some"))


def test_ignored_mode_predicate_falls_back_to_categories():
    registry = default_mode_predicates(ignored={"markdown"})
    p = make_pipeline(mode_predicates=registry)
    doc = Document("Some `helle` code\n", path="README.md")
    assert p.accepts(doc, token_for(doc, "helle"))


def test_mode_predicate_replaces_category_check():
    class Everything:
        def check(self, document, token):
            return True

    registry = ModePredicateRegistry({"python": Everything()})
    p = make_pipeline(mode_predicates=registry)
    doc = Document("import helle\n", path="mod.py")
    assert p.accepts(doc, token_for(doc, "helle"))


def test_markup_detector_toggle():
    doc = Document('<div class="note">hello</div>\n', path="page.html")
    assert not make_pipeline().accepts(doc, token_for(doc, "div"))
    assert make_pipeline(extra_detection_enabled=False).accepts(doc, token_for(doc, "div"))


def test_doublon_verdicts_suppressed_by_default():
    doublon = Finding("the", 4, 7, 1, VerdictKind.DOUBLON)
    typo = Finding("helle", 0, 5, 1)
    assert not make_pipeline().reportable(doublon)
    assert make_pipeline(suppress_doublons=False).reportable(doublon)
    assert make_pipeline().reportable(typo)


def test_should_check_without_word():
    p = make_pipeline()
    doc = Document("   \n", path="notes.txt")
    assert not p.should_check(doc, 1)
