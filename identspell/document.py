"""Document — a text buffer snapshot with categories, viewport and findings."""
import logging
import re
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

from identspell.lexer import LITERAL_CATEGORIES, CategoryMap, Span, categorize
from identspell.modes import Mode, mode_for_path
from identspell.pipeline import Finding, VerdictKind

logger = logging.getLogger(__name__)

WORD_RE = re.compile(r"[^\W_]+")
SYMBOL_RE = re.compile(r"[\w']+")
BACKEND_BATCH_SIZE = 200


@dataclass(frozen=True)
class Token:
    text: str
    start: int
    end: int


class Document:
    """Holds the text of one buffer and everything the core asks the host for.

    Categories are computed lazily and recomputed by refontify(). Findings
    from the last scan are kept in document order.
    """

    def __init__(self, text: str, path: Optional[str] = None, mode: Optional[Mode] = None,
                 visible: bool = True, viewport: Optional[Tuple[int, int]] = None):
        self.path = path
        self.mode = mode or mode_for_path(path)
        self.visible = visible
        self._viewport = viewport
        self.revision = 0
        self.cache: Dict = {}
        self.findings: List[Finding] = []
        self._set_text(text)

    @classmethod
    def from_file(cls, path, encoding: str = "utf-8", **kwargs) -> "Document":
        text = Path(path).read_text(encoding=encoding)
        return cls(text, path=str(path), **kwargs)

    def _set_text(self, text: str):
        self.text = text
        self._categories: Optional[CategoryMap] = None
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def set_text(self, text: str):
        """Replace the content; categories and findings become stale."""
        self._set_text(text)
        self.revision += 1
        self.cache.clear()
        self.findings = []

    @property
    def size(self) -> int:
        return len(self.text)

    @property
    def viewport(self) -> Tuple[int, int]:
        if self._viewport is None:
            return 0, self.size
        start, end = self._viewport
        return max(0, start), min(self.size, end)

    def scroll_to(self, start: int, end: int):
        self._viewport = (start, end)

    # Categories

    def refontify(self, start: int = 0, end: Optional[int] = None):
        """Recompute categories covering [start, end).

        Lexing restarts at a line outside any comment or string and runs to
        the end of the text, so literals crossing either bound stay whole.
        """
        if end is None:
            end = self.size
        if self._categories is None or (start == 0 and end >= self.size):
            self._categories = CategoryMap(categorize(self.text, self.mode))
            return
        start = self._resync_point(start)
        kept = [s for s in self._categories.spans if s.end <= start]
        self._categories = CategoryMap(kept + categorize(self.text, self.mode, start))

    def _resync_point(self, pos: int) -> int:
        """Latest line start at or before POS where lexing can begin."""
        while True:
            span = self._literal_at(pos)
            if span is not None:
                pos = span.start
            line_start = self._line_starts[self.line_of(pos) - 1]
            covering = self._literal_at(line_start)
            if covering is None or covering.start == line_start:
                return line_start
            pos = covering.start

    def _literal_at(self, pos: int) -> Optional[Span]:
        span = self._categories.span_at(pos)
        if span is not None and span.category in LITERAL_CATEGORIES:
            return span
        return None

    def category_at(self, pos: int) -> Optional[str]:
        if self._categories is None:
            self.refontify()
        return self._categories.category_at(pos)

    # Words

    def word_at(self, pos: int) -> Optional[Token]:
        """The word containing POS, or the one ending right before it."""
        return self._match_at(WORD_RE, pos)

    def symbol_at(self, pos: int) -> Optional[Token]:
        """Like word_at, but spanning underscores and apostrophes."""
        token = self._match_at(SYMBOL_RE, pos)
        if token is None:
            return None
        text = token.text.strip("'")
        offset = token.text.index(text) if text else 0
        return Token(text, token.start + offset, token.start + offset + len(text))

    def _match_at(self, pattern, pos: int) -> Optional[Token]:
        if pos < 0 or pos > self.size:
            return None
        line = self.line_of(pos)
        line_start = self._line_starts[line - 1]
        for m in pattern.finditer(self.text, line_start):
            if m.start() > pos:
                break
            if m.start() <= pos <= m.end():
                return Token(m.group(), m.start(), m.end())
        return None

    def words(self, start: int = 0, end: Optional[int] = None) -> Iterator[Token]:
        if end is None:
            end = self.size
        for m in WORD_RE.finditer(self.text, start, end):
            yield Token(m.group(), m.start(), m.end())

    def line_of(self, pos: int) -> int:
        """1-based line number of POS."""
        return bisect_right(self._line_starts, pos)

    # Scanning

    def scan(self, pipeline, start: int = 0, end: Optional[int] = None) -> List[Finding]:
        """Check every word in [start, end) and record the findings."""
        if end is None:
            end = self.size
        found: List[Finding] = []
        candidates: List[Token] = []
        previous: Optional[Token] = None

        for token in self.words(start, end):
            accepted = pipeline.accepts(self, token)
            if (accepted and previous is not None
                    and previous.text.lower() == token.text.lower()
                    and self.text[previous.end:token.start].isspace()):
                found.append(self._finding(token, VerdictKind.DOUBLON))
            previous = token
            if accepted:
                candidates.append(token)

        flagged = self._flagged_words(pipeline.backend, candidates)
        for token in candidates:
            if token.text in flagged and pipeline.confirm(self, token):
                found.append(self._finding(token, VerdictKind.TYPO))

        found = sorted((f for f in found if pipeline.reportable(f)), key=lambda f: f.start)
        outside = [f for f in self.findings if f.end <= start or f.start >= end]
        self.findings = sorted(outside + found, key=lambda f: f.start)
        return found

    def _flagged_words(self, backend, tokens: List[Token]) -> Set[str]:
        unique = list(dict.fromkeys(t.text for t in tokens))
        flagged: Set[str] = set()
        for i in range(0, len(unique), BACKEND_BATCH_SIZE):
            batch = unique[i:i + BACKEND_BATCH_SIZE]
            flagged.update(v.word for v in backend.check_words(batch) if v.is_typo)
        return flagged

    def _finding(self, token: Token, kind: VerdictKind) -> Finding:
        return Finding(token.text, token.start, token.end, self.line_of(token.start), kind)

    def next_typo(self, pos: int = 0) -> Optional[Finding]:
        """First finding starting at or after POS."""
        starts = [f.start for f in self.findings]
        i = bisect_left(starts, pos)
        if i < len(self.findings):
            return self.findings[i]
        return None

    def typos(self) -> Iterator[Finding]:
        """Walk the findings with the next_typo cursor, in document order.

        Findings sharing a start (a doublon that is also a typo) are all
        yielded.
        """
        pos = 0
        while True:
            finding = self.next_typo(pos)
            if finding is None:
                return
            i = self.findings.index(finding)
            while i < len(self.findings) and self.findings[i].start == finding.start:
                yield self.findings[i]
                i += 1
            pos = finding.start + 1
