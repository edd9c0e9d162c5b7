import logging
import threading
from typing import Optional

from trainfinder.index.builder import IndexBuilder, RebuildInProgressError
from trainfinder.index.types import RebuildResult

logger = logging.getLogger(__name__)


class RebuildScheduler:
    """Rebuilds once at start, then every `interval` seconds after the previous attempt ends."""

    def __init__(self, builder: IndexBuilder, interval: float) -> None:
        self.builder = builder
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            # a stop that timed out mid-rebuild leaves the loop alive; resume it
            self._stop.clear()
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="IndexRebuildScheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Index scheduler still finishing a rebuild after %.1fs", timeout)
                return
            self._thread = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def trigger(self) -> RebuildResult:
        """Manual rebuild on the caller's thread. Raises RebuildInProgressError if one is running."""
        logger.info("Manual index rebuild requested")
        return self.builder.rebuild()

    def _run_once(self, reason: str) -> None:
        logger.info("%s index rebuild starting", reason.capitalize())
        try:
            self.builder.rebuild()
        except RebuildInProgressError:
            logger.info("%s rebuild skipped: another rebuild is running", reason.capitalize())
        except Exception as e:
            logger.error("%s rebuild failed: %r", reason.capitalize(), e)

    def _run(self) -> None:
        self._run_once("initial")
        while True:
            logger.info("Next index rebuild in %.0fs", self.interval)
            if self._stop.wait(self.interval):
                break
            self._run_once("scheduled")
