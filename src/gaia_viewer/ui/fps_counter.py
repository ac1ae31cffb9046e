"""Frame-rate bookkeeping for the diagnostic overlay."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque


class FPSCounter:
    """Counts frames drawn during the trailing one-second window."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._frames: Deque[float] = deque()

    def tick(self) -> int:
        now = self._clock()
        self._frames.append(now)
        while self._frames and now - self._frames[0] >= 1.0:
            self._frames.popleft()
        return len(self._frames)


def overlay_text(fps: int, camera_height: float) -> str:
    return f"FPS: {fps} - Camera height: {camera_height}"
