import numpy as np
from dataclasses import dataclass


class DeviceUnavailable(RuntimeError):
    """The capture device could not be opened, started or read."""


class _EndOfStream:
    def __repr__(self):
        return "END_OF_STREAM"


END_OF_STREAM = _EndOfStream()

PCM16_SCALE = 32768.0


def decode_pcm16(data: bytes) -> np.ndarray:
    """Convert little-endian signed 16-bit mono bytes to floats in [-1, 1]."""
    usable = len(data) - (len(data) % 2)
    ints = np.frombuffer(data[:usable], dtype="<i2")
    return ints.astype(np.float64) / PCM16_SCALE


@dataclass(frozen=True)
class AudioFrame:
    """One capture buffer of normalized mono samples."""
    samples: np.ndarray
    sample_rate: int

    @property
    def length(self) -> int:
        return int(self.samples.size)

    @classmethod
    def from_pcm16(cls, data: bytes, sample_rate: int) -> "AudioFrame":
        return cls(decode_pcm16(data), sample_rate)


class FrameSource:
    """Base for anything the session can pull frames from.

    Subclasses implement open/next_frame/close. next_frame may block and
    returns END_OF_STREAM once no more frames will come.
    """

    def open(self):
        pass

    def next_frame(self):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class SignalSource(FrameSource):
    """Replays an in-memory signal as consecutive frames."""

    def __init__(self, signal, sample_rate: int, frame_length: int):
        self.signal = np.asarray(signal, dtype=np.float64).reshape(-1)
        self.sample_rate = sample_rate
        self.frame_length = frame_length
        self._pos = 0
        self.is_open = False

    def open(self):
        self._pos = 0
        self.is_open = True

    def next_frame(self):
        if self._pos >= self.signal.size:
            return END_OF_STREAM
        chunk = self.signal[self._pos:self._pos + self.frame_length]
        self._pos += self.frame_length
        return AudioFrame(chunk, self.sample_rate)

    def close(self):
        self.is_open = False
