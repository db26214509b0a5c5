import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass

logger = logging.getLogger("keygrid")


class StageTimer:
    """Wall-clock milliseconds per named stage of one solve.

    A stage that raises is still timed and its name is added to failed.
    """

    def __init__(self):
        self.timings: dict[str, float] = {}
        self.failed: list[str] = []
        self._start = time.perf_counter()

    @contextmanager
    def stage(self, name: str):
        t0 = time.perf_counter()
        ok = False
        try:
            yield
            ok = True
        finally:
            self.timings[name] = round((time.perf_counter() - t0) * 1000, 1)
            if ok:
                logger.info("stage=%s elapsed=%.1fms", name, self.timings[name])
            else:
                self.failed.append(name)
                logger.warning("stage=%s failed after %.1fms", name, self.timings[name])

    @property
    def total_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 1)

    def summary(self) -> dict:
        return {**self.timings, "total": self.total_ms}


@dataclass
class SearchStats:
    """Counters for one search run."""

    visits: int = 0
    max_depth: int = 0
    completions: int = 0
    best_updates: int = 0
    skipped_visited: int = 0
    skipped_wall: int = 0
    skipped_lock: int = 0
    pruned: int = 0

    def summary(self) -> dict:
        return asdict(self)
