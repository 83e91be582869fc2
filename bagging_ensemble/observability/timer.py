#!filepath: bagging_ensemble/observability/timer.py
import threading
import time
from typing import Dict


class Timer:
    """
    perf_counter based named timer
    - start(name)
    - end(name) -> elapsed seconds

    Names may be started from several worker threads at once.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start: Dict[str, float] = {}
        self._lock = threading.Lock()

    def start(self, name: str):
        if not self.enabled:
            return
        with self._lock:
            self._start[name] = time.perf_counter()

    def end(self, name: str) -> float:
        if not self.enabled:
            return 0.0
        with self._lock:
            if name not in self._start:
                return 0.0
            started = self._start.pop(name)
        return time.perf_counter() - started
