# features.py
from typing import Any, List, Sequence

from .config import FSR_FULL_SCALE, IMU_FULL_SCALE, NUM_FSR
from .models import SensorSample

FeatureVector = List[float]


def channel(values: Sequence[Any], index: int) -> float:
    """
    Read one raw channel; missing or non-numeric values count as 0.
    """
    try:
        v = values[index]
    except (IndexError, TypeError):
        return 0.0
    try:
        return float(v)
    except (TypeError, ValueError):
        return 0.0


def _clamp(x: float, lo: float, hi: float) -> float:
    return min(max(x, lo), hi)


def normalize(sample: SensorSample) -> FeatureVector:
    """
    Scale one sample into the 12-element model input:
      [0..5]  pressure / 1024        -> [0, 1]
      [6..8]  accel xyz / 16384      -> [-1, 1]
      [9..11] gyro xyz / 16384       -> [-1, 1]
    """
    out = [_clamp(channel(sample.fsr, i) / FSR_FULL_SCALE, 0.0, 1.0) for i in range(NUM_FSR)]
    for axes in (sample.accel, sample.gyro):
        out.extend(_clamp(channel(axes, i) / IMU_FULL_SCALE, -1.0, 1.0) for i in range(3))
    return out
