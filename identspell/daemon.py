"""Watch daemon — re-checks files when they are saved."""
import logging
import os
import threading
from typing import Dict, Iterable, List, Optional

from identspell.document import Document
from identspell.pipeline import Finding

logger = logging.getLogger(__name__)


class Watcher:
    """Polls file modification times and re-checks changed files.

    A changed mtime counts as "content committed": the file is reloaded
    into its Document and handed to the scheduler, which applies its own
    debounce and size caps.
    """

    def __init__(self, paths: Iterable[str], scheduler, interval_ms: int = 500):
        self.paths = [str(p) for p in paths]
        self.scheduler = scheduler
        self.interval_sec = interval_ms / 1000.0
        self._documents: Dict[str, Document] = {}
        self._mtimes: Dict[str, float] = {}
        self._reported: Dict[str, List[Finding]] = {}
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self):
        return self._running

    def document(self, path: str) -> Optional[Document]:
        return self._documents.get(str(path))

    def start(self):
        if self._running:
            return
        self._running = True
        logger.info("Watching %d file(s)", len(self.paths))
        self._schedule()

    def stop(self):
        self._running = False
        timer = self._timer
        if timer is not None:
            timer.cancel()
            if timer is not threading.current_thread():
                timer.join()
            self._timer = None
        with self._lock:
            for document in self._documents.values():
                self.scheduler.dispose(document)
            self._documents.clear()
        logger.info("Watcher stopped")

    def _schedule(self):
        if not self._running:
            return
        self._timer = threading.Timer(self.interval_sec, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def _tick(self):
        if not self._running:
            return
        try:
            self.poll()
        finally:
            self._schedule()

    def poll(self) -> List[str]:
        """Check every file whose mtime changed. Returns the checked paths."""
        checked = []
        with self._lock:
            for path in self.paths:
                try:
                    mtime = os.path.getmtime(path)
                except OSError:
                    self._forget(path)
                    continue
                if self._mtimes.get(path) == mtime:
                    continue
                if self._on_saved(path):
                    self._mtimes[path] = mtime
                    checked.append(path)
        return checked

    def _forget(self, path: str):
        document = self._documents.pop(path, None)
        if document is not None:
            self.scheduler.dispose(document)
        self._mtimes.pop(path, None)
        self._reported.pop(path, None)

    def _on_saved(self, path: str) -> bool:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return False

        document = self._documents.get(path)
        if document is None:
            document = Document(text, path=path)
            self._documents[path] = document
        else:
            document.set_text(text)

        if not self.scheduler.maybe_check(document):
            return False

        findings = list(document.typos())
        if findings != self._reported.get(path):
            for finding in findings:
                logger.info("%s:%d: %s '%s'", path, finding.line, finding.kind.value, finding.word)
            if not findings:
                logger.info("%s: no typos", path)
            self._reported[path] = findings
        return True
