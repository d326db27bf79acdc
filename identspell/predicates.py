"""Word predicates — mode-registered, extension-detector and user veto sources.

A predicate answers True (check the word), False (skip it) or None (no
opinion, it does not apply to this document).
"""
import logging
import re
from bisect import bisect_right
from typing import Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class RangeSet:
    """Merged half-open ranges with containment lookup."""

    def __init__(self, ranges: Iterable[Tuple[int, int]] = ()):
        merged: List[List[int]] = []
        for start, end in sorted(r for r in ranges if r[1] > r[0]):
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        self._starts = [r[0] for r in merged]
        self._ends = [r[1] for r in merged]

    def __contains__(self, pos: int) -> bool:
        i = bisect_right(self._starts, pos) - 1
        return i >= 0 and pos < self._ends[i]

    def __len__(self):
        return len(self._starts)


def _ranges(pattern: re.Pattern, text: str, group: int = 0) -> List[Tuple[int, int]]:
    return [m.span(group) for m in pattern.finditer(text)]


class WordPredicate:
    """Capability interface for a source of word-level decisions."""

    source = ""

    def check(self, document, token) -> Optional[bool]:
        raise NotImplementedError


class CachedRangePredicate(WordPredicate):
    """Rejects tokens inside ranges computed once per document revision."""

    def skipped_ranges(self, text: str) -> RangeSet:
        raise NotImplementedError

    def applies_to(self, mode) -> bool:
        return True

    def check(self, document, token) -> Optional[bool]:
        if not self.applies_to(document.mode):
            return None
        key = (type(self).__name__, document.revision)
        ranges = document.cache.get(key)
        if ranges is None:
            ranges = self.skipped_ranges(document.text)
            document.cache[key] = ranges
        return token.start not in ranges


FENCE_RE = re.compile(r"^(```|~~~)[^\n]*\n.*?^\1[^\n]*$", re.MULTILINE | re.DOTALL)
INLINE_CODE_RE = re.compile(r"`[^`\n]+`")
URL_RE = re.compile(r"\b(?:https?|ftp|file)://[^\s)>\]]+|\bwww\.[^\s)>\]]+")
MD_LINK_TARGET_RE = re.compile(r"\]\(([^)\n]*)\)")
MD_HTML_TAG_RE = re.compile(r"</?[A-Za-z][^>\n]*>")


class MarkdownPredicate(CachedRangePredicate):
    """Mode predicate for markdown: skip code, URLs and link targets."""

    source = "mode"

    def skipped_ranges(self, text: str) -> RangeSet:
        ranges = _ranges(FENCE_RE, text)
        ranges += _ranges(INLINE_CODE_RE, text)
        ranges += _ranges(URL_RE, text)
        ranges += _ranges(MD_LINK_TARGET_RE, text, 1)
        ranges += _ranges(MD_HTML_TAG_RE, text)
        return RangeSet(ranges)


TAG_RE = re.compile(r"<[!/?]?[A-Za-z][^<>]*>")
QUOTED_RE = re.compile(r"\"[^\"]*\"|'[^']*'")
TEMPLATE_RE = re.compile(r"\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\}|<%.*?%>", re.DOTALL)
ENTITY_RE = re.compile(r"&#?\w+;")
RAW_BLOCK_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


class MarkupDetector(CachedRangePredicate):
    """Skips tag and attribute names, template expressions and entities.

    Quoted attribute values stay checkable.
    """

    source = "detector"
    modes = frozenset({"html", "xml", "vue", "jinja"})

    def applies_to(self, mode) -> bool:
        return mode.name in self.modes

    def skipped_ranges(self, text: str) -> RangeSet:
        ranges = _ranges(TEMPLATE_RE, text)
        ranges += _ranges(ENTITY_RE, text)
        ranges += _ranges(RAW_BLOCK_RE, text)
        for tag in TAG_RE.finditer(text):
            pos = tag.start()
            for value in QUOTED_RE.finditer(text, tag.start(), tag.end()):
                ranges.append((pos, value.start() + 1))
                pos = value.end() - 1
            ranges.append((pos, tag.end()))
        return RangeSet(ranges)


ORG_KEYWORD_RE = re.compile(r"^[ \t]*#\+\w+:?", re.MULTILINE)
ORG_BLOCK_RE = re.compile(
    r"^[ \t]*#\+begin_(src|example|export)\b.*?^[ \t]*#\+end_\1\b[^\n]*",
    re.MULTILINE | re.DOTALL | re.IGNORECASE,
)
ORG_DRAWER_RE = re.compile(r"^[ \t]*:PROPERTIES:.*?^[ \t]*:END:", re.MULTILINE | re.DOTALL)
ORG_VERBATIM_RE = re.compile(r"(?<![\w])([=~])[^\s=~](?:[^\n]*?[^\s])?\1(?![\w])")
ORG_LINK_TARGET_RE = re.compile(r"\[\[([^\]\n]+)\]")


class OutlineDetector(CachedRangePredicate):
    """Skips org keywords, source blocks, drawers, verbatim and link targets."""

    source = "detector"
    modes = frozenset({"org"})

    def applies_to(self, mode) -> bool:
        return mode.name in self.modes

    def skipped_ranges(self, text: str) -> RangeSet:
        ranges = _ranges(ORG_BLOCK_RE, text)
        ranges += _ranges(ORG_DRAWER_RE, text)
        ranges += _ranges(ORG_KEYWORD_RE, text)
        ranges += _ranges(ORG_VERBATIM_RE, text)
        ranges += _ranges(ORG_LINK_TARGET_RE, text, 1)
        ranges += _ranges(URL_RE, text)
        return RangeSet(ranges)


class ModePredicateRegistry(WordPredicate):
    """Per-mode predicates; modes in the ignore set fall back to categories."""

    source = "mode"

    def __init__(self, predicates: Optional[Dict[str, WordPredicate]] = None,
                 ignored: Iterable[str] = ()):
        self._predicates: Dict[str, WordPredicate] = dict(predicates or {})
        self.ignored = frozenset(ignored)

    def register(self, mode_name: str, predicate: WordPredicate):
        self._predicates[mode_name] = predicate

    def lookup(self, mode_name: str) -> Optional[WordPredicate]:
        if mode_name in self.ignored:
            return None
        return self._predicates.get(mode_name)

    def check(self, document, token) -> Optional[bool]:
        predicate = self.lookup(document.mode.name)
        if predicate is None:
            return None
        return predicate.check(document, token)


def default_mode_predicates(ignored: Iterable[str] = ()) -> ModePredicateRegistry:
    return ModePredicateRegistry({"markdown": MarkdownPredicate()}, ignored)


def default_detectors() -> List[WordPredicate]:
    return [MarkupDetector(), OutlineDetector()]


class UserPredicate(WordPredicate):
    """Wraps a user callable taking the raw word; it has the final say."""

    source = "user"

    def __init__(self, func: Callable[[str], bool]):
        self.func = func

    def check(self, document, token) -> Optional[bool]:
        return bool(self.func(token.text))
