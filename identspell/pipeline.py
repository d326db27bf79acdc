"""Word acceptance pipeline — decides whether a flagged word is a real typo.

Stages, cheapest first:
1. Word must be inside the buffer and at least two characters long
2. Mode predicate (unless the mode is in the ignore set)
3. Extra detectors for markup/template and outline documents
4. Category check, when no mode predicate applied
5. Compound identifiers: split and check the retained sub-words
6. Single words: keep the host verdict, except for the apostrophe quirk
7. User predicate on the raw word
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from identspell.backend import create_backend
from identspell.categories import CategoryClassifier
from identspell.predicates import (
    ModePredicateRegistry, UserPredicate, WordPredicate, default_detectors,
    default_mode_predicates,
)
from identspell.rules import IgnoreList
from identspell.splitter import (
    MAX_RUNS, MIN_SUB_WORD_LENGTH, checkable_sub_words, split_identifier,
)

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 2


class VerdictKind(Enum):
    TYPO = "typo"
    DOUBLON = "doublon"


@dataclass(frozen=True)
class Finding:
    word: str
    start: int
    end: int
    line: int
    kind: VerdictKind = VerdictKind.TYPO


def _accept_all(word: str) -> bool:
    return True


class WordAcceptancePipeline:
    def __init__(self, backend, classifier: CategoryClassifier,
                 mode_predicates: Optional[ModePredicateRegistry] = None,
                 detectors: Optional[List[WordPredicate]] = None,
                 extra_predicate: Optional[Callable[[str], bool]] = None,
                 min_sub_word_length: int = MIN_SUB_WORD_LENGTH,
                 max_runs: int = MAX_RUNS,
                 camel_case_enabled: bool = True,
                 extra_detection_enabled: bool = True,
                 apostrophe_quirk_enabled: bool = True,
                 suppress_doublons: bool = True):
        self.backend = backend
        self.classifier = classifier
        self.mode_predicates = mode_predicates or ModePredicateRegistry()
        self.detectors = detectors if detectors is not None else default_detectors()
        self.user_predicate = UserPredicate(extra_predicate or _accept_all)
        self.min_sub_word_length = min_sub_word_length
        self.max_runs = max_runs
        self.camel_case_enabled = camel_case_enabled
        self.extra_detection_enabled = extra_detection_enabled
        self.apostrophe_quirk_enabled = apostrophe_quirk_enabled
        self.suppress_doublons = suppress_doublons

    @classmethod
    def from_config(cls, config, backend,
                    extra_predicate: Optional[Callable[[str], bool]] = None):
        return cls(
            backend,
            CategoryClassifier.from_config(config),
            mode_predicates=default_mode_predicates(config.ignored_mode_predicates),
            extra_predicate=extra_predicate,
            min_sub_word_length=config.min_word_length,
            max_runs=config.max_runs,
            camel_case_enabled=config.camel_case_enabled,
            extra_detection_enabled=config.extra_detection_enabled,
            apostrophe_quirk_enabled=config.apostrophe_quirk_enabled,
            suppress_doublons=config.suppress_doublons,
        )

    def should_check(self, document, position: int) -> bool:
        """Full decision for the word at/just before POSITION.

        Assumes the host already flagged the word with its own single-word
        check, so True keeps the typo and False clears it.
        """
        token = document.word_at(position)
        if token is None:
            return False
        return self.accepts(document, token) and self.confirm(document, token)

    def accepts(self, document, token) -> bool:
        """Stages 1-4: cheap filters, no backend involved."""
        if token.start < 0 or token.end > document.size or token.start >= token.end:
            return False
        if len(token.text) < MIN_WORD_LENGTH:
            return False

        mode_verdict = self.mode_predicates.check(document, token)
        if mode_verdict is False:
            return False

        if self.extra_detection_enabled:
            for detector in self.detectors:
                if detector.check(document, token) is False:
                    return False

        if mode_verdict is None:
            categories = document.category_at(token.start)
            if not self.classifier.is_checkable(categories, document.mode.prose):
                return False
        return True

    def confirm(self, document, token) -> bool:
        """Stages 5-7: backend-backed refinement of a flagged word."""
        if self.is_compound(token.text):
            typo = self.compound_has_typo(token.text)
        else:
            typo = True
            if self.apostrophe_quirk_enabled and self.apostrophe_quirk(document, token):
                typo = False

        if typo:
            typo = bool(self.user_predicate.check(document, token))
        return typo

    def is_compound(self, word: str) -> bool:
        # non-ASCII words go to the backend whole
        if not self.camel_case_enabled or not word.isascii():
            return False
        return len(split_identifier(word, self.max_runs)) > 1

    def compound_has_typo(self, word: str) -> bool:
        retained = checkable_sub_words(word, self.min_sub_word_length, self.max_runs)
        if not retained:
            return False
        return self.backend.has_typo(" ".join(retained))

    def apostrophe_quirk(self, document, token) -> bool:
        """True when a word right after an apostrophe is correct as a whole.

        Backends split "we've" at the apostrophe and flag "ve"; re-checking
        the full token clears such false positives.
        """
        if token.start == 0 or document.text[token.start - 1] != "'":
            return False
        if not self.classifier.is_checkable(document.category_at(token.start),
                                            document.mode.prose):
            return False
        full = document.symbol_at(token.start)
        if full is None or full.text == token.text:
            return False
        cleared = not self.backend.is_typo(full.text)
        if cleared:
            logger.debug("Apostrophe quirk cleared %r (full token %r)", token.text, full.text)
        return cleared

    def reportable(self, finding: Finding) -> bool:
        if finding.kind is VerdictKind.DOUBLON:
            return not self.suppress_doublons
        return True


def build_pipeline(config, backend=None,
                   extra_predicate: Optional[Callable[[str], bool]] = None):
    """Pipeline for CONFIG, or None when no backend is available."""
    if backend is None:
        backend = create_backend(config)
    if backend is None:
        return None
    if extra_predicate is None:
        extra_predicate = IgnoreList().accepts
    return WordAcceptancePipeline.from_config(config, backend, extra_predicate)
