"""
Tests for frames.py: PCM decoding and in-memory frame sources.
"""

import numpy as np
import pytest

from frames import END_OF_STREAM, AudioFrame, SignalSource, decode_pcm16


class TestDecodePcm16:
    def test_little_endian_scaling(self):
        data = b"\x00\x80" + b"\xff\x7f" + b"\x00\x00" + b"\x00\x40"
        out = decode_pcm16(data)
        assert out.dtype == np.float64
        assert out.tolist() == [-1.0, 32767 / 32768, 0.0, 0.5]

    def test_trailing_odd_byte_is_ignored(self):
        assert decode_pcm16(b"\x00\x40\x01").tolist() == [0.5]

    def test_empty(self):
        assert decode_pcm16(b"").size == 0

    def test_frame_from_bytes(self):
        frame = AudioFrame.from_pcm16(b"\x00\x40" * 8, 44_100)
        assert frame.length == 8
        assert frame.sample_rate == 44_100
        assert np.allclose(frame.samples, 0.5)


class TestSignalSource:
    def test_frames_then_end_of_stream(self):
        src = SignalSource(np.zeros(10_000), 44_100, 4096)
        with src:
            assert src.is_open
            lengths = []
            while True:
                frame = src.next_frame()
                if frame is END_OF_STREAM:
                    break
                lengths.append(frame.length)
        assert lengths == [4096, 4096, 1808]
        assert not src.is_open

    def test_reopen_rewinds(self):
        src = SignalSource(np.arange(8, dtype=float), 8000, 4)
        src.open()
        src.next_frame()
        src.open()
        assert src.next_frame().samples.tolist() == [0.0, 1.0, 2.0, 3.0]

    def test_frames_carry_sample_rate(self):
        src = SignalSource(np.zeros(4), 22_050, 4)
        src.open()
        assert src.next_frame().sample_rate == 22_050
        assert src.next_frame() is END_OF_STREAM


def test_audio_frame_is_frozen():
    frame = AudioFrame(np.zeros(4), 44_100)
    with pytest.raises((TypeError, AttributeError)):
        frame.sample_rate = 8000  # type: ignore[misc]
