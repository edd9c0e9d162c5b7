import time
from typing import Callable


class Pacer:
    """Fixed pause between successive upstream calls. A delay of 0 disables it."""

    def __init__(self, delay: float, *, sleep: Callable[[float], None] = time.sleep) -> None:
        self.delay = delay
        self._sleep = sleep

    def pause(self) -> None:
        if self.delay > 0:
            self._sleep(self.delay)
