import numpy as np
from config import ENERGY_FLOOR, PARABOLA_EPS

NO_PITCH = float("nan")


def has_pitch(estimate) -> bool:
    return estimate is not None and np.isfinite(estimate) and estimate > 0


def lag_bounds(n: int, sr: int, min_hz: float, max_hz: float):
    """Integer lag range [min_lag, max_lag] searched for a period."""
    min_lag = max(1, int(sr // max_hz))
    max_lag = min(n - 1, int(sr // min_hz))
    return min_lag, max_lag


def autocorrelation(y: np.ndarray, max_lag: int) -> np.ndarray:
    """Unnormalized autocorrelation C(0..max_lag) over the whole frame."""
    n = y.size
    return np.array([np.dot(y[:n - lag], y[lag:]) for lag in range(max_lag + 1)])


def parabolic_lag(corr: np.ndarray, peak: int, min_lag: int, max_lag: int) -> float:
    """Refine an integer peak lag with a parabola through its neighbours.

    Only interior peaks are refined; at either end of the searched range
    the integer lag is returned unchanged.
    """
    if not (min_lag < peak < max_lag):
        return float(peak)

    y0, y1, y2 = corr[peak - 1], corr[peak], corr[peak + 1]
    denom = y0 - 2 * y1 + y2
    if abs(denom) < PARABOLA_EPS:
        return float(peak)
    return peak + 0.5 * (y0 - y2) / denom


def estimate_pitch_autocorr(y: np.ndarray, sr: int, min_hz: float, max_hz: float,
                            energy_floor: float = ENERGY_FLOOR) -> float:
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    if y.size < 2:
        return NO_PITCH

    energy = float(np.dot(y, y))
    if energy <= energy_floor:
        return NO_PITCH

    min_lag, max_lag = lag_bounds(y.size, sr, min_hz, max_hz)
    if max_lag < min_lag:
        return NO_PITCH

    corr = autocorrelation(y, max_lag)
    # same divisor for every lag, ranking matches the raw correlation
    seg = corr[min_lag:max_lag + 1] / energy
    # argmax keeps the first maximum, so the shortest lag wins ties
    peak = min_lag + int(np.argmax(seg))
    if peak <= 0:
        return NO_PITCH

    lag = parabolic_lag(corr, peak, min_lag, max_lag)
    if lag <= 0:
        return NO_PITCH

    f0 = sr / lag
    if not np.isfinite(f0) or f0 <= 0 or f0 > sr / 2.0:
        return NO_PITCH
    return float(f0)


class PitchDetector:
    """Autocorrelation pitch estimator bound to an admissible frequency range."""

    def __init__(self, min_hz: float = 50.0, max_hz: float = 2000.0,
                 energy_floor: float = ENERGY_FLOOR):
        self.min_hz = min_hz
        self.max_hz = max_hz
        self.energy_floor = energy_floor

    @classmethod
    def from_config(cls, config):
        return cls(config.min_hz, config.max_hz)

    def detect(self, frame) -> float:
        """Return the fundamental frequency of the frame in Hz, or NO_PITCH."""
        return estimate_pitch_autocorr(
            frame.samples, frame.sample_rate, self.min_hz, self.max_hz, self.energy_floor
        )
