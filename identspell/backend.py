"""Spell-checking backends — aspell/hunspell subprocesses and pyspellchecker."""
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from spellchecker import SpellChecker

logger = logging.getLogger(__name__)

ERROR_MARKERS = ('&', '#')
CORRECT_MARKERS = ('*', '+', '-')


class BackendUnavailable(Exception):
    """The configured backend cannot be used (missing program, bad dictionary)."""


@dataclass
class BackendVerdict:
    word: str
    is_typo: bool
    suggestions: List[str] = field(default_factory=list)


class Backend:
    """Checks words; returns one verdict per checked token."""

    name = ""

    def check_words(self, words: List[str]) -> List[BackendVerdict]:
        raise NotImplementedError

    def has_typo(self, text: str) -> bool:
        """True if any token of the space-separated TEXT is misspelled."""
        words = text.split()
        if not words:
            return False
        return any(v.is_typo for v in self.check_words(words))

    def is_typo(self, word: str) -> bool:
        return self.has_typo(word)


def parse_ispell_output(output: str, words: Iterable[str] = ()) -> List[BackendVerdict]:
    """Parse ispell `-a` protocol output.

    The first line is the version banner. Each checked token yields one
    line: '*', '+' or '-' when correct, '& word count offset: s1, s2' or
    '# word offset' when not. Unparseable lines are skipped.
    """
    words = list(words)
    verdicts: List[BackendVerdict] = []
    lines = output.splitlines()
    if lines and lines[0].startswith('@'):
        lines = lines[1:]

    for line in lines:
        line = line.strip()
        if not line:
            continue
        marker = line[0]
        index = len(verdicts)
        expected = words[index] if index < len(words) else ""

        if marker in CORRECT_MARKERS:
            verdicts.append(BackendVerdict(expected, False))
        elif marker == '&':
            head, _, tail = line.partition(': ')
            parts = head.split()
            if len(parts) < 4:
                logger.debug("Malformed backend line: %r", line)
                continue
            suggestions = [s.strip() for s in tail.split(',') if s.strip()]
            verdicts.append(BackendVerdict(parts[1], True, suggestions))
        elif marker == '#':
            parts = line.split()
            if len(parts) < 2:
                logger.debug("Malformed backend line: %r", line)
                continue
            verdicts.append(BackendVerdict(parts[1], True))
        else:
            logger.debug("Unexpected backend line: %r", line)

    return verdicts


class IspellBackend(Backend):
    """Runs an ispell-compatible program once per request."""

    program = ""

    def __init__(self, timeout_ms: int = 2000, personal_dictionary: str = ""):
        path = shutil.which(self.program)
        if path is None:
            raise BackendUnavailable(f"{self.program} not found in PATH")
        self.path = path
        self.timeout_sec = timeout_ms / 1000.0
        self.personal_dictionary = personal_dictionary

    def command(self) -> List[str]:
        raise NotImplementedError

    def run(self, text: str) -> Optional[str]:
        """Send one line of TEXT, return raw output or None on failure."""
        # '^' keeps the line from being read as an ispell command
        try:
            proc = subprocess.run(
                self.command(),
                input="^" + text + "\n",
                capture_output=True,
                text=True,
                timeout=self.timeout_sec,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out checking %r", self.program, text[:80])
            return None
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("%s failed: %s", self.program, e)
            return None

        if proc.returncode != 0:
            logger.warning("%s exited with %d: %s", self.program, proc.returncode,
                           proc.stderr.strip()[:200])
            return None
        return proc.stdout

    def check_words(self, words: List[str]) -> List[BackendVerdict]:
        if not words:
            return []
        output = self.run(" ".join(words))
        if output is None:
            return []
        return parse_ispell_output(output, words)

    def has_typo(self, text: str) -> bool:
        if not text.strip():
            return False
        output = self.run(text)
        if output is None:
            return False
        return any(line.startswith(ERROR_MARKERS) for line in output.splitlines())


class AspellBackend(IspellBackend):
    name = "aspell"
    program = "aspell"

    def __init__(self, language: str = "en", timeout_ms: int = 2000,
                 personal_dictionary: str = ""):
        super().__init__(timeout_ms, personal_dictionary)
        self.language = language

    def command(self) -> List[str]:
        args = [self.path, "pipe", f"--lang={self.language}", "--encoding=utf-8"]
        if self.personal_dictionary:
            args.append(f"--personal={self.personal_dictionary}")
        return args


class HunspellBackend(IspellBackend):
    name = "hunspell"
    program = "hunspell"

    def __init__(self, dictionary: str = "en_US", timeout_ms: int = 2000,
                 personal_dictionary: str = ""):
        super().__init__(timeout_ms, personal_dictionary)
        self.dictionary = dictionary

    def command(self) -> List[str]:
        args = [self.path, "-a", "-d", self.dictionary]
        if self.personal_dictionary:
            args.extend(["-p", self.personal_dictionary])
        return args


def read_personal_dictionary(path: str) -> List[str]:
    """Words from an aspell (.pws) or hunspell personal word list."""
    words = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("personal_ws") or line.isdigit():
                continue
            # hunspell entries may carry affix flags: word/FLAGS
            words.append(line.split("/", 1)[0])
    return words


class PySpellCheckerBackend(Backend):
    """In-process backend on pyspellchecker's word-frequency dictionaries."""

    name = "pyspellchecker"

    def __init__(self, language: str = "en", personal_dictionary: str = ""):
        try:
            self._spell = SpellChecker(language=language, distance=1)
        except ValueError as e:
            raise BackendUnavailable(f"pyspellchecker has no '{language}' dictionary") from e
        if personal_dictionary:
            try:
                self.add_words(read_personal_dictionary(personal_dictionary))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Cannot read personal dictionary %s: %s", personal_dictionary, e)

    def add_words(self, words: Iterable[str]):
        self._spell.word_frequency.load_words(list(words))

    def check_words(self, words: List[str]) -> List[BackendVerdict]:
        unknown = self._spell.unknown(words)
        verdicts = []
        for word in words:
            if word.lower() in unknown:
                suggestions = sorted(self._spell.candidates(word.lower()) or [])
                verdicts.append(BackendVerdict(word, True, suggestions))
            else:
                verdicts.append(BackendVerdict(word, False))
        return verdicts


def _build_backend(name: str, config) -> Backend:
    if name == "aspell":
        return AspellBackend(config.aspell_language, config.backend_timeout_ms,
                             config.personal_dictionary)
    if name == "hunspell":
        return HunspellBackend(config.hunspell_dictionary, config.backend_timeout_ms,
                               config.personal_dictionary)
    if name == "pyspellchecker":
        # pyspellchecker names dictionaries by bare language code
        language = config.aspell_language.split("_")[0].lower()
        return PySpellCheckerBackend(language, config.personal_dictionary)
    raise BackendUnavailable(f"unknown backend {name!r}")


def create_backend(config) -> Optional[Backend]:
    """Build the configured backend, or the fallback, or None when neither is usable."""
    name = config.backend
    try:
        return _build_backend(name, config)
    except BackendUnavailable as e:
        fallback = config.fallback_backend
        if not fallback or fallback == name:
            logger.info("Spell checking disabled: %s", e)
            return None
        logger.info("%s; falling back to %s", e, fallback)

    try:
        return _build_backend(fallback, config)
    except BackendUnavailable as e:
        logger.info("Spell checking disabled: %s", e)
        return None
