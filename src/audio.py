import queue
from typing import Optional

import sounddevice as sd

from frames import AudioFrame, DeviceUnavailable, FrameSource


class MicrophoneSource(FrameSource):
    """Live mono capture through sounddevice, one frame per driver block."""

    def __init__(self, sample_rate: int, frame_length: int, device: Optional[int] = None,
                 read_timeout_s: float = 2.0):
        self.sample_rate = sample_rate
        self.frame_length = frame_length
        self.device = device
        self.read_timeout_s = read_timeout_s

        self._stream = None
        self._blocks = queue.Queue()

    def open(self):
        """Open and start the input stream; raises DeviceUnavailable on failure."""
        if self._stream is not None:
            return

        def callback(indata, frames, time_info, status):
            if status:
                print(f"[Audio] Status: {status}")
            self._blocks.put(bytes(indata))

        try:
            stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                blocksize=self.frame_length,
                device=self.device,
                channels=1,
                dtype="int16",
                callback=callback,
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            print(f"[Audio] Failed to start stream: {e}")
            raise DeviceUnavailable(f"Unable to open microphone: {e}") from e

        self._stream = stream
        print(f"[Audio] Stream started: {self.sample_rate} Hz, frame {self.frame_length}")

    def next_frame(self) -> AudioFrame:
        """Block until the next captured block is available."""
        if self._stream is None:
            raise DeviceUnavailable("Microphone stream is not open")
        try:
            data = self._blocks.get(timeout=self.read_timeout_s)
        except queue.Empty:
            raise DeviceUnavailable(
                f"No audio received for {self.read_timeout_s:.1f} s"
            ) from None
        return AudioFrame.from_pcm16(data, self.sample_rate)

    def close(self):
        if self._stream is None:
            return

        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()

        while not self._blocks.empty():
            self._blocks.get_nowait()

        print("[Audio] Stream stopped")
