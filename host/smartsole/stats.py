# stats.py
import datetime as dt
from dataclasses import dataclass, replace
from typing import Callable, List

from .config import KCAL_PER_STEP, STEP_LENGTH_M
from .models import ActivitySession


@dataclass(frozen=True)
class DailyStats:
    date: str
    steps: int = 0
    time_on_feet_min: int = 0
    calories: int = 0
    distance_m: int = 0
    active_sessions: int = 0

    @property
    def time_on_feet_formatted(self) -> str:
        return f"{self.time_on_feet_min // 60}h {self.time_on_feet_min % 60}m"

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0


def _today() -> str:
    return dt.date.today().isoformat()


class DailyStatsTracker:
    """Folds finished sessions into today's totals; rolls over at midnight."""

    def __init__(self, today: Callable[[], str] = _today):
        self.today = today
        self.stats = DailyStats(date=today())

    def _roll(self):
        d = self.today()
        if d != self.stats.date:
            self.stats = DailyStats(date=d)

    def add_session(self, session: ActivitySession) -> DailyStats:
        self._roll()
        steps = self.stats.steps + session.total_steps
        # sub-minute remainder of each session is dropped
        minutes = self.stats.time_on_feet_min + session.on_feet_ms // 60_000
        self.stats = replace(
            self.stats,
            steps=steps,
            time_on_feet_min=minutes,
            calories=int(steps * KCAL_PER_STEP),
            distance_m=int(steps * STEP_LENGTH_M),
            active_sessions=self.stats.active_sessions + session.active_periods,
        )
        return self.stats

    def reset(self):
        self.stats = DailyStats(date=self.today())


def insights(stats: DailyStats) -> List[str]:
    out = []

    if stats.steps >= 10000:
        out.append("Excellent! You've reached 10,000+ steps today!")
    elif stats.steps >= 7500:
        out.append("Great job! You're close to your 10,000 step goal!")
    elif stats.steps >= 5000:
        out.append("Good progress! Keep moving to reach your step goal!")
    else:
        out.append("Start moving! Every step counts toward better health!")

    if stats.time_on_feet_min >= 300:
        out.append("Great active time! You've been on your feet for 5+ hours!")
    elif stats.time_on_feet_min >= 180:
        out.append("Good activity level! Consider a few more active periods!")
    elif stats.time_on_feet_min >= 60:
        out.append("Nice start! Try to increase your time on feet!")
    else:
        out.append("Remember to take regular breaks from sitting!")

    if stats.active_sessions >= 8:
        out.append("Amazing! You've had lots of active sessions today!")
    elif stats.active_sessions >= 5:
        out.append("Good job breaking up your day with activity!")

    return out
