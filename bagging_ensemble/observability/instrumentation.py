#!filepath: bagging_ensemble/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict, Iterable, Optional

from bagging_ensemble.observability.timer import Timer
from bagging_ensemble import logs


@dataclass
class Instrumentation:
    """
    Instrumentation (leaf-only accounting + parent scope).

    Rules:
    1. timeline only records leaf timers (record=True)
    2. parent timers (record=False) only bound wall-time
    3. no logging on the hot path
    """

    enabled: bool = True

    def __post_init__(self):
        self._timer = Timer(enabled=self.enabled)

        # timeline: OrderedDict[leaf_name, elapsed_seconds]
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = elapsed

        return _ctx()

    def reset(self):
        self.timeline.clear()

    # ---------------------------------------------------------
    # timeline report (cold path)
    # ---------------------------------------------------------
    def generate_timeline_report(self, title: str, names: Optional[Iterable[str]] = None):
        """
        Log recorded leaves in insertion order, or only `names` in that order.
        """
        logs.info(f"[Timeline] ===== {title} =====")

        if names is None:
            rows = list(self.timeline.items())
        else:
            rows = [(n, self.timeline[n]) for n in names if n in self.timeline]

        total = 0.0
        for name, sec in rows:
            logs.info(f"[Timeline] {str(name):<30} {sec:>8.3f}s")
            total += sec

        logs.info(f"[Timeline] Total{'':<27} {total:>8.3f}s")
        logs.info("[Timeline] ===========================================")


class NoOpInstrumentation:
    """Used when observability is disabled."""

    def __init__(self):
        self.timeline: Dict[str, float] = {}

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def reset(self):
        pass

    def generate_timeline_report(self, title: str, names: Optional[Iterable[str]] = None):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
