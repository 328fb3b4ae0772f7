from collections import deque

import numpy as np

from dsp import NO_PITCH, has_pitch


class Smoother:
    """Running mean of recent pitch estimates over a fixed time horizon.

    Entries are (frequency_hz, timestamp_ms) pairs kept in arrival order.
    Eviction is by age only: a burst of readings never pushes out older
    ones that are still inside the horizon.
    """

    def __init__(self, horizon_ms: float = 4000):
        self.horizon_ms = horizon_ms
        self._window = deque()

    def observe(self, estimate: float, timestamp_ms: float):
        if has_pitch(estimate):
            self._window.append((float(estimate), timestamp_ms))

    def average(self, now_ms: float) -> float:
        while self._window and now_ms - self._window[0][1] > self.horizon_ms:
            self._window.popleft()

        if not self._window:
            return NO_PITCH
        return float(np.mean([f for f, _ in self._window]))

    def reset(self):
        self._window.clear()

    def __len__(self):
        return len(self._window)
