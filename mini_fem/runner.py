# mini_fem/runner.py
"""
Background analysis runs with latest-wins publication.

Every submit() gets a generation number. When a run finishes it is
published only if no newer generation has been published already;
older results are discarded. Runs are never cancelled mid-computation.
A failed run publishes its error and no solution.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_all
from typing import Any, Mapping, Optional, Union

from .analysis import AnalysisResult, build_analysis
from .config import AnalysisConfig

logger = logging.getLogger(__name__)


class AnalysisRunner:
    """
    Runs build_analysis() off the caller's thread.

    Usage:
        with AnalysisRunner() as runner:
            runner.submit({"family": "quad", "nx": 4})
            runner.submit({"family": "quad", "nx": 8})
            runner.wait()
            result = runner.latest   # result of the nx=8 run
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._submitted = 0
        self._published = 0
        self._latest: Optional[AnalysisResult] = None
        self._error: Optional[BaseException] = None
        self._pending = set()

    @property
    def latest(self) -> Optional[AnalysisResult]:
        """Most recent published result, None while a failure is published."""
        with self._lock:
            return self._latest

    @property
    def error(self) -> Optional[BaseException]:
        """Error of the most recent published run, if it failed."""
        with self._lock:
            return self._error

    @property
    def generation(self) -> int:
        """Generation of the most recent published run (0 before any)."""
        with self._lock:
            return self._published

    def submit(self, config: Union[AnalysisConfig, Mapping[str, Any]]) -> Future:
        with self._lock:
            self._submitted += 1
            generation = self._submitted
        future = self._executor.submit(self._run, generation, config)
        with self._lock:
            self._pending.add(future)
        # outside the lock: runs immediately if the future is already done
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _run(self, generation: int, config) -> AnalysisResult:
        try:
            result = build_analysis(config)
        except Exception as e:
            self._publish(generation, None, e)
            raise
        self._publish(generation, result, None)
        return result

    def _publish(self, generation: int, result, error) -> None:
        with self._lock:
            if generation < self._published:
                logger.debug(
                    "Discarding stale result of run %d (run %d already published)",
                    generation, self._published,
                )
                return
            self._published = generation
            if error is not None:
                self._latest = None
                self._error = error
            else:
                self._latest = result
                self._error = None
        if error is not None:
            logger.warning("Analysis run %d failed: %s", generation, error)

    @property
    def pending(self) -> int:
        """Number of submitted runs that have not finished yet."""
        with self._lock:
            return len(self._pending)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every run submitted so far has finished."""
        with self._lock:
            pending = list(self._pending)
        wait_all(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
        return False
