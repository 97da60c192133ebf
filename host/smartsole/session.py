# session.py
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .config import ACTIVITY_LABELS
from .models import ActivitySession, ClassificationResult, SensorSample, SessionRecord
from .steps import StepDetector
from .window import WindowedClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackingUpdate:
    seq: int
    result: Optional[ClassificationResult]
    steps: int
    on_feet: str
    cadence: float = 0.0
    distance_m: float = 0.0
    calories: float = 0.0


def compute_breakdown(records: Sequence[SessionRecord]) -> Dict[str, Dict[str, float]]:
    """
    Each labelled record owns the time until the next record's timestamp.
    Returns {label: {"ms": ..., "pct": ...}} for the labels that occurred.
    """
    ms: Dict[str, float] = {}
    for cur, nxt in zip(records, records[1:]):
        if cur.result is None:
            continue
        dt = max(0, nxt.sample.timestamp - cur.sample.timestamp)
        ms[cur.result.label] = ms.get(cur.result.label, 0.0) + dt
    if records and records[-1].result is not None:
        ms.setdefault(records[-1].result.label, 0.0)

    total = sum(ms.values())
    out = {}
    for label in ACTIVITY_LABELS:
        if label in ms:
            out[label] = {"ms": ms[label], "pct": (100.0 * ms[label] / total) if total > 0 else 0.0}
    return out


class TrackingSession:
    """
    Owns one pipeline (adapter + step detector) for the lifetime of a
    tracking run. Samples may arrive from the BLE notify thread, so every
    entry point takes the lock.
    """

    def __init__(self, adapter: WindowedClassifier, detector: StepDetector,
                 store=None, clock: Callable[[], float] = time.time):
        self.adapter = adapter
        self.detector = detector
        self.store = store
        self.clock = clock
        self.lock = threading.Lock()
        self.tracking = False
        self.started_at: Optional[float] = None
        self.records: List[SessionRecord] = []
        self.last_result: Optional[ClassificationResult] = None

    def _reset_pipeline(self):
        self.adapter.reset()
        self.detector.reset()
        self.records = []
        self.last_result = None

    def start(self):
        with self.lock:
            if self.tracking:
                logger.warning("start() while already tracking; restarting session")
            self._reset_pipeline()
            self.tracking = True
            self.started_at = self.clock()
            logger.info("Tracking started")

    def process(self, sample: SensorSample) -> Optional[TrackingUpdate]:
        with self.lock:
            if not self.tracking:
                return None
            result = self.adapter.submit(sample)
            steps, on_feet = self.detector.process_sample(sample)
            self.records.append(SessionRecord(sample, result))
            if result is not None:
                self.last_result = result
            d = self.detector
            return TrackingUpdate(sample.seq, result, steps, on_feet,
                                  d.cadence(), d.distance_m, d.calories)

    def stop(self) -> ActivitySession:
        with self.lock:
            if not self.tracking:
                raise RuntimeError("stop() called while not tracking")
            on_feet_ms = self.detector.flush()
            session = ActivitySession(
                id=uuid.uuid4().hex,
                started_at=self.started_at,
                ended_at=self.clock(),
                records=tuple(self.records),
                total_steps=self.detector.total_steps,
                on_feet_ms=on_feet_ms,
                active_periods=self.detector.active_periods,
                breakdown=compute_breakdown(self.records),
            )
            self.tracking = False
            self.started_at = None
            self._reset_pipeline()

        logger.info("Tracking stopped: %d samples, %d steps", len(session.records), session.total_steps)
        if self.store is not None:
            self.store.save(session)
        return session
