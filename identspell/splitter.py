"""Identifier splitter — breaks camelCase / PascalCase tokens into sub-words."""
import logging
from enum import IntEnum
from typing import List

logger = logging.getLogger(__name__)

MAX_RUNS = 64
MIN_SUB_WORD_LENGTH = 3


class CharClass(IntEnum):
    LOWER = 1
    UPPER = 2
    DIGIT = 3
    OTHER = 4


def char_class(ch: str) -> CharClass:
    """Classify one character. Only ASCII ranges count; anything else is OTHER."""
    if 'a' <= ch <= 'z':
        return CharClass.LOWER
    if 'A' <= ch <= 'Z':
        return CharClass.UPPER
    if '0' <= ch <= '9':
        return CharClass.DIGIT
    return CharClass.OTHER


def split_identifier(word: str, max_runs: int = MAX_RUNS) -> List[str]:
    """Split WORD into sub-words on character class changes.

    "PDFLoader" -> ["PDF", "Loader"], "myHTMLParser" -> ["my", "HTML", "Parser"],
    "ID3Tag" -> ["ID", "3", "Tag"].
    """
    runs: List[str] = []
    classes: List[CharClass] = []
    last = None
    start = 0

    for i, ch in enumerate(word):
        cls = char_class(ch)
        if cls == last:
            continue
        if last is not None:
            runs.append(word[start:i])
            classes.append(last)
        start = i
        last = cls
    if last is not None:
        runs.append(word[start:])
        classes.append(last)

    if len(runs) > max_runs:
        logger.debug("Identifier %r has %d runs, keeping first %d", word[:80], len(runs), max_runs)
        runs = runs[:max_runs]
        classes = classes[:max_runs]

    # "PDFL", "oader" -> "PDF", "Loader"
    for i in range(len(runs) - 1):
        if classes[i] == CharClass.UPPER and classes[i + 1] == CharClass.LOWER and runs[i]:
            runs[i + 1] = runs[i][-1] + runs[i + 1]
            runs[i] = runs[i][:-1]

    return [r for r in runs if r]


def handle_sub_word(sub_word: str, min_length: int = MIN_SUB_WORD_LENGTH) -> str:
    """Return SUB_WORD if it is worth sending to the backend, else ""."""
    if len(sub_word) < min_length:
        return ""
    if not all(char_class(ch) in (CharClass.LOWER, CharClass.UPPER) for ch in sub_word):
        return ""
    return sub_word


def checkable_sub_words(word: str, min_length: int = MIN_SUB_WORD_LENGTH,
                        max_runs: int = MAX_RUNS) -> List[str]:
    """Split WORD and keep only sub-words the backend should see."""
    kept = []
    for sub_word in split_identifier(word, max_runs=max_runs):
        handled = handle_sub_word(sub_word, min_length)
        if handled:
            kept.append(handled)
    return kept
