"""Assigns lexical categories to text for the built-in host.

Only comments, string literals and definition sites are recognized. Other
code stays uncategorized.
"""
import re
from bisect import bisect_right
from typing import List, NamedTuple, Optional

from identspell import categories as cat
from identspell.modes import Mode

DEFINITION_RE = re.compile(
    r"\b(def|class|function|func|fn|var|let|const|struct|enum|interface|type|defun|defvar)"
    r"\s+\(?([A-Za-z_$][\w$-]*)"
)
ASSIGNMENT_RE = re.compile(r"^[ \t]*([A-Za-z_$][\w$]*)[ \t]*(?::=|=(?!=))", re.MULTILINE)

TYPE_KEYWORDS = frozenset({"class", "struct", "enum", "interface", "type"})
VARIABLE_KEYWORDS = frozenset({"var", "let", "const", "defvar"})
LITERAL_CATEGORIES = frozenset({cat.COMMENT, cat.COMMENT_DELIMITER, cat.DOC, cat.STRING})


class Span(NamedTuple):
    start: int
    end: int
    category: str


class CategoryMap:
    """Sorted, non-overlapping category spans with position lookup."""

    def __init__(self, spans: List[Span]):
        self.spans = sorted(spans)
        self._starts = [s.start for s in self.spans]

    def span_at(self, pos: int) -> Optional[Span]:
        i = bisect_right(self._starts, pos) - 1
        if i >= 0:
            span = self.spans[i]
            if span.start <= pos < span.end:
                return span
        return None

    def category_at(self, pos: int) -> Optional[str]:
        span = self.span_at(pos)
        return span.category if span is not None else None

    def __len__(self):
        return len(self.spans)


def _string_end(text: str, pos: int, delim: str) -> int:
    """Return the index just past the string literal opened at POS."""
    i = pos + len(delim)
    n = len(text)
    multiline = len(delim) == 3 or delim == "`"
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if text.startswith(delim, i):
            return i + len(delim)
        if ch == "\n" and not multiline:
            return i
        i += 1
    return n


def _literal_spans(text: str, mode: Mode, start: int, end: int) -> List[Span]:
    spans = []
    i = start
    while i < end:
        ch = text[i]
        matched = False

        for marker in mode.line_comments:
            if text.startswith(marker, i):
                eol = text.find("\n", i)
                stop = end if eol < 0 or eol > end else eol
                spans.append(Span(i, i + len(marker), cat.COMMENT_DELIMITER))
                spans.append(Span(i + len(marker), stop, cat.COMMENT))
                i = stop
                matched = True
                break
        if matched:
            continue

        for opener, closer in mode.block_comments:
            if text.startswith(opener, i):
                close = text.find(closer, i + len(opener), end)
                stop = end if close < 0 else close + len(closer)
                spans.append(Span(i, stop, cat.COMMENT))
                i = stop
                matched = True
                break
        if matched:
            continue

        if ch in "\"'`":
            for delim in mode.string_delimiters:
                if text.startswith(delim, i):
                    stop = min(_string_end(text, i, delim), end)
                    kind = cat.DOC if mode.doc_strings and len(delim) == 3 else cat.STRING
                    spans.append(Span(i, stop, kind))
                    i = stop
                    matched = True
                    break
            if matched:
                continue

        i += 1
    return spans


def _code_gaps(literals: List[Span], start: int, end: int):
    pos = start
    for span in literals:
        if span.start > pos:
            yield pos, span.start
        pos = max(pos, span.end)
    if pos < end:
        yield pos, end


def categorize(text: str, mode: Mode, start: int = 0, end: Optional[int] = None) -> List[Span]:
    """Categorize TEXT[start:end] according to MODE's syntax."""
    if end is None:
        end = len(text)
    literals = _literal_spans(text, mode, start, end)
    spans = list(literals)
    if not mode.prose:
        for gap_start, gap_end in _code_gaps(literals, start, end):
            spans.extend(_definition_spans(text, gap_start, gap_end))
    return spans


def _definition_spans(text: str, start: int, end: int) -> List[Span]:
    spans = []
    taken = set()
    for m in DEFINITION_RE.finditer(text, start, end):
        keyword = m.group(1)
        if keyword in TYPE_KEYWORDS:
            kind = cat.TYPE_NAME
        elif keyword in VARIABLE_KEYWORDS:
            kind = cat.VARIABLE_NAME
        else:
            kind = cat.FUNCTION_NAME
        spans.append(Span(m.start(1), m.end(1), cat.KEYWORD))
        spans.append(Span(m.start(2), m.end(2), kind))
        taken.add(m.start(2))
    for m in ASSIGNMENT_RE.finditer(text, start, end):
        if m.start(1) not in taken and m.group(1) not in VARIABLE_KEYWORDS:
            spans.append(Span(m.start(1), m.end(1), cat.VARIABLE_NAME))
    return spans
