# steps.py
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

from .config import (
    STEP_CHANNELS, HEEL_CHANNELS, MIDFOOT_CHANNELS, NUM_FSR,
    PRESSURE_DELTA_THRESHOLD, MIN_STEP_PRESSURE, MIN_STEP_INTERVAL_MS,
    ACCEL_MOVEMENT_THRESHOLD, REGION_PRESSURE_FLOOR, ON_FEET_THRESHOLD,
    STEP_LENGTH_M, KCAL_PER_STEP, CADENCE_WINDOW_MS,
)
from .features import channel
from .models import SensorSample

# =========================== State ===========================

@dataclass
class StepCounterState:
    total_steps: int = 0
    last_step_ms: Optional[int] = None
    prev_step_pressure: float = 0.0
    on_feet: bool = False
    on_feet_since_ms: Optional[int] = None
    on_feet_total_ms: int = 0
    active_periods: int = 0
    last_seen_ms: int = 0
    recent_steps: Deque[int] = field(default_factory=deque)   # step timestamps for cadence


def format_duration(ms: int) -> str:
    minutes = max(0, int(ms)) // 60_000
    return f"{minutes // 60}h {minutes % 60}m"


def _region_sum(fsr, indices) -> float:
    return sum(channel(fsr, i) for i in indices)

# =========================== Detector ===========================

class StepDetector:
    """
    Threshold step counter plus an on-feet timer, both driven by raw samples.
    Timing uses the sample's device timestamp (ms).
    """

    def __init__(self):
        self.state = StepCounterState()

    # ---- step detection ----
    def _detect_step(self, sample: SensorSample, step_pressure: float) -> bool:
        st = self.state
        now = sample.timestamp
        delta = abs(step_pressure - st.prev_step_pressure)
        st.prev_step_pressure = step_pressure

        if delta <= PRESSURE_DELTA_THRESHOLD:
            return False
        if step_pressure <= MIN_STEP_PRESSURE:
            return False
        if st.last_step_ms is not None and now - st.last_step_ms <= MIN_STEP_INTERVAL_MS:
            return False

        ax, ay, az = (channel(sample.accel, i) for i in range(3))
        moving = math.sqrt(ax * ax + ay * ay + az * az) > ACCEL_MOVEMENT_THRESHOLD
        foot_pattern = (_region_sum(sample.fsr, HEEL_CHANNELS) > REGION_PRESSURE_FLOOR
                        or _region_sum(sample.fsr, MIDFOOT_CHANNELS) > REGION_PRESSURE_FLOOR)
        if not (moving or foot_pattern):
            return False

        st.total_steps += 1
        st.last_step_ms = now
        st.recent_steps.append(now)
        self._prune_recent(now)
        return True

    def _prune_recent(self, now: int):
        st = self.state
        while st.recent_steps and now - st.recent_steps[0] > CADENCE_WINDOW_MS:
            st.recent_steps.popleft()

    # ---- on-feet timer ----
    def _update_on_feet(self, now: int, total_pressure: float):
        st = self.state
        active = total_pressure > ON_FEET_THRESHOLD
        if active and not st.on_feet:
            st.on_feet = True
            st.on_feet_since_ms = now
            st.active_periods += 1
        elif not active and st.on_feet:
            self._commit(now)

    def _commit(self, now: int):
        st = self.state
        if st.on_feet_since_ms is not None:
            st.on_feet_total_ms += max(0, now - st.on_feet_since_ms)
        st.on_feet = False
        st.on_feet_since_ms = None

    def process_sample(self, sample: SensorSample) -> Tuple[int, str]:
        """
        Feed one sample. Returns (total steps, formatted time on feet).
        """
        step_pressure = _region_sum(sample.fsr, STEP_CHANNELS)
        total_pressure = _region_sum(sample.fsr, range(NUM_FSR))

        self._detect_step(sample, step_pressure)
        self._update_on_feet(sample.timestamp, total_pressure)
        self.state.last_seen_ms = sample.timestamp
        return self.state.total_steps, format_duration(self.on_feet_ms())

    def on_feet_ms(self, now: Optional[int] = None) -> int:
        """Committed time on feet plus the open interval, if any."""
        st = self.state
        now = st.last_seen_ms if now is None else now
        total = st.on_feet_total_ms
        if st.on_feet and st.on_feet_since_ms is not None:
            total += max(0, now - st.on_feet_since_ms)
        return total

    def flush(self, now: Optional[int] = None) -> int:
        """Close an open on-feet interval; returns the committed total."""
        if self.state.on_feet:
            self._commit(self.state.last_seen_ms if now is None else now)
        return self.state.on_feet_total_ms

    # ---- derived ----
    def cadence(self, now: Optional[int] = None) -> float:
        """Steps per minute over the last CADENCE_WINDOW_MS."""
        st = self.state
        self._prune_recent(st.last_seen_ms if now is None else now)
        if len(st.recent_steps) < 2:
            return 0.0
        span = st.recent_steps[-1] - st.recent_steps[0]
        if span <= 0:
            return 0.0
        return (len(st.recent_steps) - 1) * 60_000.0 / span

    @property
    def total_steps(self) -> int:
        return self.state.total_steps

    @property
    def active_periods(self) -> int:
        return self.state.active_periods

    @property
    def distance_m(self) -> float:
        return self.state.total_steps * STEP_LENGTH_M

    @property
    def calories(self) -> float:
        return self.state.total_steps * KCAL_PER_STEP

    def reset(self):
        self.state = StepCounterState()
