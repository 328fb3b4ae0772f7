import os
import platform
from dataclasses import dataclass
from typing import Optional

IS_PI = platform.machine().startswith(("arm", "aarch64")) or "raspbian" in platform.platform().lower()

A4_HZ = 440.0
NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

ENERGY_FLOOR = 1e-8
PARABOLA_EPS = 1e-12

DISPLAY_RANGE_CENTS = 100.0
STOP_TIMEOUT_S = 0.2
UI_FPS = 30

COLOR_BG = (11, 18, 32)
COLOR_SURF = (18, 26, 42)
COLOR_ACCENT = (45, 164, 78)
COLOR_ACCENT2 = (31, 111, 235)
COLOR_TEXT = (230, 237, 243)
COLOR_SUBTLE = (122, 134, 153)
COLOR_WARN = (240, 173, 78)
COLOR_RED = (200, 60, 60)


class InvalidConfiguration(ValueError):
    """Raised when a tuner setting is out of range."""


@dataclass
class TunerConfig:
    target_hz: float = A4_HZ
    smoothing_ms: int = 4000
    frame_length: int = 4096
    sample_rate: int = 44_100
    min_hz: float = 50.0
    max_hz: float = 2000.0
    input_device: Optional[int] = None

    def validate(self):
        """Raise InvalidConfiguration for any non-positive or inverted setting."""
        for name in ("target_hz", "smoothing_ms", "frame_length", "sample_rate", "min_hz", "max_hz"):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value!r}")
        if self.min_hz >= self.max_hz:
            raise InvalidConfiguration(
                f"min_hz ({self.min_hz}) must be below max_hz ({self.max_hz})"
            )
        return self

    @classmethod
    def from_env(cls) -> "TunerConfig":
        """Build a config from TUNER_* environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            target_hz=_env("TUNER_TARGET_HZ", float, defaults.target_hz),
            smoothing_ms=_env("TUNER_SMOOTHING_MS", int, defaults.smoothing_ms),
            frame_length=_env("TUNER_FRAME_LENGTH", int, defaults.frame_length),
            sample_rate=_env("TUNER_SAMPLE_RATE", int, defaults.sample_rate),
            min_hz=_env("TUNER_MIN_HZ", float, defaults.min_hz),
            max_hz=_env("TUNER_MAX_HZ", float, defaults.max_hz),
            input_device=_env("TUNER_INPUT_DEVICE", int, defaults.input_device),
        ).validate()


def _env(key, cast, default):
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise InvalidConfiguration(f"{key}={raw!r} is not a valid {cast.__name__}") from e
