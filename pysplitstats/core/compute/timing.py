"""
Wall-clock timing for the public solvers.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Total elapsed time plus named sections.

    The solvers time a 'design' section (validation, sorting) and a
    'statistic' section (the registered rule). ``result()`` returns
    ``{'total_seconds': ..., 'design': ..., 'statistic': ...}``.
    """

    def __init__(self) -> None:
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time a named section; re-entering a name adds to its total."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
