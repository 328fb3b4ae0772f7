import math
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import STOP_TIMEOUT_S, InvalidConfiguration, TunerConfig
from dsp import NO_PITCH, PitchDetector, has_pitch
from frames import END_OF_STREAM, DeviceUnavailable
from notes import cents_offset, clamp_cents, nearest_note, note_frequency, note_label, parse_note
from smoothing import Smoother


class SessionState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"


@dataclass(frozen=True)
class TuningResult:
    """Snapshot of the tuner output for one processed frame."""
    frequency_hz: float = NO_PITCH
    cents: float = math.nan
    note: Optional[str] = None
    octave: Optional[int] = None
    target_hz: float = NO_PITCH

    @property
    def has_pitch(self) -> bool:
        return has_pitch(self.frequency_hz)

    @property
    def display_cents(self) -> float:
        return clamp_cents(self.cents)

    @property
    def label(self) -> str:
        return note_label(None if self.note is None else (self.note, self.octave))

    @classmethod
    def from_average(cls, avg_hz: float, target_hz: float) -> "TuningResult":
        if not has_pitch(avg_hz):
            return cls(target_hz=target_hz)
        note = nearest_note(avg_hz)
        return cls(
            frequency_hz=avg_hz,
            cents=cents_offset(avg_hz, target_hz),
            note=note[0],
            octave=note[1],
            target_hz=target_hz,
        )


def _validate_target(target_hz) -> float:
    try:
        value = float(target_hz)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"Target frequency must be a number, got {target_hz!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfiguration(f"Target frequency must be positive, got {target_hz!r}")
    return value


class TunerSession:
    """Drives frame source -> detector -> smoother -> note mapping on a worker thread.

    Results are handed to ``on_result`` (or put on ``self.results``) without
    waiting on the consumer. A device failure during capture is reported once
    through ``on_error`` and ends the session.
    """

    def __init__(self, config: Optional[TunerConfig] = None, on_result=None, on_error=None,
                 clock=time.monotonic):
        self.config = config or TunerConfig()
        self.detector = PitchDetector.from_config(self.config)
        self.results = queue.Queue()
        self._on_result = on_result or self.results.put_nowait
        self._on_error = on_error
        self._clock = clock

        self._target_hz = self.config.target_hz
        self._state = SessionState.IDLE
        self._stop = threading.Event()
        self._thread = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def target_hz(self) -> float:
        return self._target_hz

    @target_hz.setter
    def target_hz(self, value):
        self._target_hz = _validate_target(value)

    def set_target_note(self, name: str, octave: int) -> float:
        self.target_hz = note_frequency(parse_note(name, octave))
        return self._target_hz

    def start(self, source, target_hz=None):
        """Open the source and start capturing.

        Raises InvalidConfiguration or DeviceUnavailable without leaving IDLE.
        """
        if self._state is SessionState.CAPTURING:
            print("[Session] Already capturing, start ignored")
            return

        target = _validate_target(self._target_hz if target_hz is None else target_hz)
        self.config.validate()
        if source is None:
            raise DeviceUnavailable("No audio input source supplied")

        source.open()

        self._target_hz = target
        self._stop = threading.Event()
        smoother = Smoother(self.config.smoothing_ms)
        self._state = SessionState.CAPTURING
        self._thread = threading.Thread(
            target=self._run, args=(source, smoother, self._stop),
            name="Audio-Capture-Thread", daemon=True,
        )
        try:
            self._thread.start()
        except RuntimeError:
            self._state = SessionState.IDLE
            source.close()
            raise
        print(f"[Session] Capturing, target {target:.2f} Hz")

    def stop(self):
        if self._state is SessionState.IDLE and self._thread is None:
            return

        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(STOP_TIMEOUT_S)
            if thread.is_alive():
                print(f"[Session] Capture thread did not stop within {STOP_TIMEOUT_S:.1f} s")
        self._state = SessionState.IDLE
        print("[Session] Stopped")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to finish on its own; True when it has."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def process_frame(self, frame, smoother: Smoother, now_ms: float) -> TuningResult:
        target = self._target_hz
        smoother.observe(self.detector.detect(frame), now_ms)
        return TuningResult.from_average(smoother.average(now_ms), target)

    def _run(self, source, smoother, stop):
        error = None
        try:
            while not stop.is_set():
                frame = source.next_frame()
                if frame is END_OF_STREAM or stop.is_set():
                    break
                result = self.process_frame(frame, smoother, self._clock() * 1000.0)
                self._on_result(result)
        except DeviceUnavailable as e:
            print(f"[Session] Device error: {e}")
            error = e
        finally:
            try:
                source.close()
            except Exception as e:
                print(f"[Session] Failed to close source: {e}")
            finally:
                smoother.reset()
                if not stop.is_set():
                    self._state = SessionState.IDLE

        if error is not None and self._on_error is not None:
            self._on_error(error)
