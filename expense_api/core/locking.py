"""
Optional single-writer scope around a store transaction.

Without it two concurrent load/mutate/save sequences race and the last save
wins. Enabling it serializes transactions between threads of one process only;
separate processes sharing the same file still race.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager, nullcontext
from typing import ContextManager, Iterator


class SingleWriterLock:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._lock = threading.Lock()

    @contextmanager
    def _held(self) -> Iterator[None]:
        with self._lock:
            yield

    def transaction(self) -> ContextManager[None]:
        """Scope held for one load/mutate/save; a no-op when disabled."""
        if not self.enabled:
            return nullcontext()
        return self._held()
