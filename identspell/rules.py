"""Persistent ignore list — words the user never wants reported."""
import json
from pathlib import Path
from identspell.config import IGNORE_FILE


class IgnoreList:
    def __init__(self, path: Path = IGNORE_FILE, load: bool = True):
        self._path = Path(path)
        self._words: set[str] = set()  # lowercased
        if load:
            self.load()

    def load(self):
        if self._path.exists():
            try:
                with open(self._path, "r") as f:
                    data = json.load(f)
                self._words = {w.lower() for w in data.get("ignored", [])}
            except (json.JSONDecodeError, IOError):
                pass

    def save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump({"ignored": sorted(self._words)}, f, indent=2, ensure_ascii=False)

    def add(self, word: str):
        self._words.add(word.strip().lower())
        self.save()

    def remove(self, word: str):
        self._words.discard(word.strip().lower())
        self.save()

    def is_ignored(self, word: str) -> bool:
        return word.strip().lower() in self._words

    def accepts(self, word: str) -> bool:
        """Final-stage predicate: False vetoes reporting WORD."""
        return not self.is_ignored(word)

    def clear(self):
        self._words.clear()
        self.save()

    def __len__(self):
        return len(self._words)
