"""Configuration management — JSON-based, stored in ~/.config/identspell/."""
import json
from pathlib import Path

DEFAULT_CONFIG = {
    "backend": "aspell",  # "aspell", "hunspell" or "pyspellchecker"
    "fallback_backend": "pyspellchecker",  # used when "backend" is unavailable; "" disables
    "aspell_language": "en",
    "hunspell_dictionary": "en_US",
    "personal_dictionary": "",
    "backend_timeout_ms": 2000,
    "checkable_categories": [
        "comment", "comment-delimiter", "doc", "string",
        "function-name", "variable-name", "type-name", "constant",
    ],
    "extra_categories": [],
    "plain_text_policy": "prose",  # "never", "prose", "source" or "always"
    "min_word_length": 3,
    "max_runs": 64,
    "update_interval_ms": 2000,
    "buffer_max": 4 * 1024 * 1024,
    "region_max": 80000,
    "start_mode": "normal",  # "normal" or "fast"
    "find_file_regexp": (
        r"\.(?:txt|md|markdown|org|py|js|ts|jsx|tsx|c|h|cc|cpp|hpp|java|go|rs|rb"
        r"|el|sh|html|htm|xml|vue|jinja|j2|css|json|yml|yaml)$"
    ),
    "exclude_file_regexp": r"(?:\.min\.js|\.lock)$",
    "exclude_directories": [
        ".git", ".svn", ".hg", "node_modules", "__pycache__",
        ".venv", "venv", "dist", "build",
    ],
    "ignored_mode_predicates": ["typescript"],
    "camel_case_enabled": True,
    "extra_detection_enabled": True,
    "apostrophe_quirk_enabled": True,
    "suppress_doublons": True,
    "watch_interval_ms": 500,
    "debug_logging": False,
}

CONFIG_DIR = Path.home() / ".config" / "identspell"
CONFIG_FILE = CONFIG_DIR / "config.json"
IGNORE_FILE = CONFIG_DIR / "ignored_words.json"


class Config:
    def __init__(self, path: Path = CONFIG_FILE, load: bool = True):
        self._path = Path(path)
        self._data = dict(DEFAULT_CONFIG)
        if load:
            self.load()

    def load(self):
        if self._path.exists():
            try:
                with open(self._path, "r") as f:
                    stored = json.load(f)
                self._data.update(stored)
            except (json.JSONDecodeError, IOError):
                pass

    def save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value
        self.save()

    def override(self, key, value):
        """Set KEY for this process only, without saving."""
        self._data[key] = value

    @property
    def backend(self):
        return self._data["backend"]

    @backend.setter
    def backend(self, val):
        self._data["backend"] = val
        self.save()

    @property
    def fallback_backend(self):
        return self._data.get("fallback_backend", "pyspellchecker")

    @property
    def aspell_language(self):
        return self._data["aspell_language"]

    @property
    def hunspell_dictionary(self):
        return self._data["hunspell_dictionary"]

    @property
    def personal_dictionary(self):
        return self._data.get("personal_dictionary", "")

    @property
    def backend_timeout_ms(self):
        return self._data.get("backend_timeout_ms", 2000)

    @property
    def checkable_categories(self):
        return frozenset(self._data["checkable_categories"])

    @property
    def extra_categories(self):
        return frozenset(self._data.get("extra_categories", []))

    @property
    def plain_text_policy(self):
        return self._data.get("plain_text_policy", "prose")

    @property
    def min_word_length(self):
        return self._data.get("min_word_length", 3)

    @property
    def max_runs(self):
        return self._data.get("max_runs", 64)

    @property
    def update_interval_ms(self):
        return self._data.get("update_interval_ms", 2000)

    @property
    def buffer_max(self):
        return self._data.get("buffer_max", 4 * 1024 * 1024)

    @property
    def region_max(self):
        return self._data.get("region_max", 80000)

    @property
    def start_mode(self):
        return self._data.get("start_mode", "normal")

    @property
    def find_file_regexp(self):
        return self._data["find_file_regexp"]

    @property
    def exclude_file_regexp(self):
        return self._data["exclude_file_regexp"]

    @property
    def exclude_directories(self):
        return frozenset(self._data["exclude_directories"])

    @property
    def ignored_mode_predicates(self):
        return frozenset(self._data.get("ignored_mode_predicates", []))

    @property
    def camel_case_enabled(self):
        return self._data.get("camel_case_enabled", True)

    @property
    def extra_detection_enabled(self):
        return self._data.get("extra_detection_enabled", True)

    @property
    def apostrophe_quirk_enabled(self):
        return self._data.get("apostrophe_quirk_enabled", True)

    @property
    def suppress_doublons(self):
        return self._data.get("suppress_doublons", True)

    @property
    def watch_interval_ms(self):
        return self._data.get("watch_interval_ms", 500)

    @property
    def debug_logging(self):
        return self._data["debug_logging"]
