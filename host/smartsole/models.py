# models.py
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

from .config import NUM_FSR, UNKNOWN_LABEL

# =========================== Samples ===========================

@dataclass(frozen=True)
class SensorSample:
    seq: int
    timestamp: int                      # device time (ms)
    fsr: Tuple[int, ...] = (0,) * NUM_FSR
    accel: Tuple[int, int, int] = (0, 0, 0)
    gyro: Tuple[int, int, int] = (0, 0, 0)
    temperature: float = 0.0
    status: int = 0
    checksum: str = "00"
    connection: str = "CONN"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["fsr"] = list(self.fsr)
        d["accel"] = list(self.accel)
        d["gyro"] = list(self.gyro)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SensorSample":
        return cls(
            seq=int(d.get("seq", 0)),
            timestamp=int(d.get("timestamp", 0)),
            fsr=tuple(d.get("fsr") or (0,) * NUM_FSR),
            accel=tuple(d.get("accel") or (0, 0, 0)),
            gyro=tuple(d.get("gyro") or (0, 0, 0)),
            temperature=float(d.get("temperature", 0.0)),
            status=int(d.get("status", 0)),
            checksum=str(d.get("checksum", "00")),
            connection=str(d.get("connection", "CONN")),
        )

# =========================== Classification ===========================

@dataclass(frozen=True)
class ClassificationResult:
    label: str
    confidence: float

    @classmethod
    def unknown(cls) -> "ClassificationResult":
        return cls(UNKNOWN_LABEL, 0.0)

# =========================== Sessions ===========================

@dataclass(frozen=True)
class SessionRecord:
    sample: SensorSample
    result: Optional[ClassificationResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sample": self.sample.to_dict(),
            "result": asdict(self.result) if self.result else None,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SessionRecord":
        res = d.get("result")
        return cls(
            sample=SensorSample.from_dict(d["sample"]),
            result=ClassificationResult(res["label"], float(res["confidence"])) if res else None,
        )


@dataclass(frozen=True)
class ActivitySession:
    """
    One finished tracking run. `breakdown` maps each activity label to
    {"ms": time attributed to it, "pct": share of the labelled time}.
    """
    id: str
    started_at: float
    ended_at: float
    records: Tuple[SessionRecord, ...] = ()
    total_steps: int = 0
    on_feet_ms: int = 0
    active_periods: int = 0              # off->on feet transitions
    breakdown: Dict[str, Dict[str, float]] = field(default_factory=dict)

    @property
    def duration_s(self) -> float:
        return max(0.0, self.ended_at - self.started_at)

    @property
    def dominant_activity(self) -> str:
        if not self.breakdown:
            return UNKNOWN_LABEL
        return max(self.breakdown.items(), key=lambda kv: kv[1]["ms"])[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "records": [r.to_dict() for r in self.records],
            "total_steps": self.total_steps,
            "on_feet_ms": self.on_feet_ms,
            "active_periods": self.active_periods,
            "breakdown": self.breakdown,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ActivitySession":
        records: List[SessionRecord] = [SessionRecord.from_dict(r) for r in d.get("records", [])]
        return cls(
            id=d["id"],
            started_at=float(d["started_at"]),
            ended_at=float(d["ended_at"]),
            records=tuple(records),
            total_steps=int(d.get("total_steps", 0)),
            on_feet_ms=int(d.get("on_feet_ms", 0)),
            active_periods=int(d.get("active_periods", 0)),
            breakdown=d.get("breakdown", {}),
        )
