"""
Shared helpers for the tuner tests.

Signals are synthesized with numpy; nothing here touches sounddevice or pygame.
"""

import numpy as np
import pytest

from frames import END_OF_STREAM, AudioFrame, FrameSource

SR = 44_100
FRAME = 4096


def sine(freq, n=FRAME, sr=SR, amp=0.5, phase=0.0):
    t = np.arange(n) / sr
    return amp * np.sin(2 * np.pi * freq * t + phase)


def frame_of(samples, sr=SR):
    return AudioFrame(np.asarray(samples, dtype=np.float64), sr)


class ScriptedSource(FrameSource):
    """Hands out a fixed list of frames, then END_OF_STREAM, recording open/close."""

    def __init__(self, frames):
        self.frames = list(frames)
        self.opened = 0
        self.closed = 0

    def open(self):
        self.opened += 1

    def next_frame(self):
        if not self.frames:
            return END_OF_STREAM
        item = self.frames.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed += 1


class FakeClock:
    def __init__(self, start=100.0, step=0.1):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock():
    return FakeClock()
