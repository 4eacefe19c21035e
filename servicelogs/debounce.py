"""SaveDebouncer - the pending 'clear saving flag' timer."""

import time
from typing import Callable, Optional

SAVE_DELAY_SECONDS = 0.8


class SaveDebouncer:
    """
    Tracks when the saving indicator should drop.

    Every autosave write calls `touch()`, which replaces any pending clear
    with a new one `delay` seconds from now. `due()` reports whether the
    quiet period has elapsed; `cancel()` forgets the pending clear. The
    clock is injectable so callers and tests control time.
    """

    def __init__(
        self,
        delay: float = SAVE_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay = delay
        self.clock = clock
        self.deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self.deadline is not None

    def touch(self) -> None:
        self.deadline = self.clock() + self.delay

    def due(self) -> bool:
        return self.deadline is not None and self.clock() >= self.deadline

    def cancel(self) -> None:
        self.deadline = None
