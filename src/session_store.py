"""
In-process store of BuilderState snapshots, one per browser session.

States are immutable; ``update`` applies a transition under a lock and
swaps the stored snapshot, so two uploads for the same session run one
after the other and the later catalog wins.
"""

import logging
import threading
import time
from typing import Callable, Dict, Tuple

from builder_state import BuilderState

logger = logging.getLogger(__name__)


class BuilderSessionStore:
    def __init__(self, ttl_seconds: int = 1800) -> None:
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, Tuple[BuilderState, float]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> BuilderState:
        with self._lock:
            self._gc()
            state, _ = self._data.get(session_id, (BuilderState(), 0.0))
            self._data[session_id] = (state, time.time())
            return state

    def update(
        self, session_id: str, transition: Callable[[BuilderState], BuilderState]
    ) -> Tuple[BuilderState, BuilderState]:
        """Apply ``transition`` atomically; returns (before, after)."""
        with self._lock:
            self._gc()
            before, _ = self._data.get(session_id, (BuilderState(), 0.0))
            after = transition(before)
            self._data[session_id] = (after, time.time())
            return before, after

    def reset(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._data)

    def _gc(self) -> None:
        now = time.time()
        expired = [k for k, (_, touched) in self._data.items() if now - touched > self.ttl_seconds]
        for k in expired:
            self._data.pop(k, None)
        if expired:
            logger.debug(f"Expired {len(expired)} builder sessions")
