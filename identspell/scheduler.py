"""Incremental check scheduler — debounced, size-capped re-checks per buffer."""
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class CheckMode(Enum):
    NORMAL = "normal"  # whole document
    FAST = "fast"      # visible viewport only


@dataclass
class ScanState:
    mode: CheckMode
    last_check: Optional[float] = None
    checking: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class Scheduler:
    """Decides when and how much of a buffer gets re-checked.

    maybe_check() may be called as often as the host likes: calls inside the
    update interval, calls while a check is running, and oversized targets
    are all no-ops. The timestamp only moves when a scan actually ran.
    """

    def __init__(self, pipeline, update_interval_ms: int = 2000,
                 buffer_max: int = 4 * 1024 * 1024, region_max: int = 80000,
                 start_mode: CheckMode = CheckMode.NORMAL,
                 buffer_predicate: Optional[Callable] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.pipeline = pipeline
        self.update_interval = update_interval_ms / 1000.0
        self.buffer_max = buffer_max
        self.region_max = region_max
        self.start_mode = start_mode
        self.buffer_predicate = buffer_predicate
        self.clock = clock
        self._states: Dict[object, ScanState] = {}
        self._states_lock = threading.Lock()

    @classmethod
    def from_config(cls, config, pipeline, buffer_predicate: Optional[Callable] = None,
                    clock: Callable[[], float] = time.monotonic) -> "Scheduler":
        return cls(
            pipeline,
            update_interval_ms=config.update_interval_ms,
            buffer_max=config.buffer_max,
            region_max=config.region_max,
            start_mode=CheckMode(config.start_mode),
            buffer_predicate=buffer_predicate,
            clock=clock,
        )

    @property
    def available(self) -> bool:
        return self.pipeline is not None and self.pipeline.backend is not None

    def state(self, buffer) -> Optional[ScanState]:
        return self._states.get(buffer)

    def _state_for(self, buffer) -> ScanState:
        with self._states_lock:
            state = self._states.get(buffer)
            if state is None:
                state = ScanState(self.start_mode)
                self._states[buffer] = state
            return state

    def set_mode(self, buffer, mode: CheckMode):
        self._state_for(buffer).mode = mode

    def dispose(self, buffer):
        """Forget BUFFER's state when the host closes it."""
        with self._states_lock:
            self._states.pop(buffer, None)

    def target_range(self, buffer, mode: CheckMode) -> Optional[Tuple[int, int]]:
        """Range to check in MODE, or None when it exceeds the size cap."""
        if mode is CheckMode.FAST:
            start, end = buffer.viewport
            if end - start > self.region_max:
                return None
            return start, end
        if buffer.size > self.buffer_max:
            return None
        return 0, buffer.size

    def maybe_check(self, buffer) -> bool:
        """Check BUFFER if allowed. Returns True when a scan ran."""
        if not self.available:
            return False

        state = self._state_for(buffer)
        if not state.lock.acquire(blocking=False):
            logger.debug("Check already running for %s", getattr(buffer, "path", buffer))
            return False
        try:
            now = self.clock()
            if state.last_check is not None and now - state.last_check < self.update_interval:
                return False
            if not buffer.visible:
                return False
            if self.buffer_predicate is not None and not self.buffer_predicate(buffer):
                return False

            target = self.target_range(buffer, state.mode)
            if target is None:
                logger.debug("Skipping %s: %s target over size cap",
                             getattr(buffer, "path", buffer), state.mode.value)
                return False

            state.checking = True
            try:
                buffer.refontify(*target)
                buffer.scan(self.pipeline, *target)
            finally:
                state.checking = False
                state.last_check = max(self.clock(), now)
            return True
        finally:
            state.lock.release()
