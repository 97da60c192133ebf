import logging
from typing import List, Optional

from smartsole.config import NUM_FSR
from smartsole.models import SensorSample

logger = logging.getLogger(__name__)

# seq,ts,f0..f5,ax,ay,az,gx,gy,gz,temp,status[,checksum[,conn]]
MIN_FIELDS = 16

STATUS_TEXT = {0: "OK", 1: "IMU_ERROR", 2: "NO_IMU"}


def _int(s: str) -> int:
    try:
        return int(s.strip())
    except ValueError:
        return 0


def _float(s: str) -> float:
    try:
        return float(s.strip())
    except ValueError:
        return 0.0


def parse_line(line: str) -> Optional[SensorSample]:
    """
    One CSV line from the insole -> SensorSample. Short lines give None;
    unparseable numeric fields read as 0.
    """
    parts = line.strip().split(",")
    if len(parts) < MIN_FIELDS:
        return None
    fsr_end = 2 + NUM_FSR
    return SensorSample(
        seq=_int(parts[0]),
        timestamp=_int(parts[1]),
        fsr=tuple(_int(p) for p in parts[2:fsr_end]),
        accel=tuple(_int(p) for p in parts[fsr_end:fsr_end + 3]),
        gyro=tuple(_int(p) for p in parts[fsr_end + 3:fsr_end + 6]),
        temperature=_float(parts[14]),
        status=_int(parts[15]),
        checksum=parts[16].strip() if len(parts) > 16 else "00",
        connection=parts[17].strip() if len(parts) > 17 else "CONN",
    )


class LineBuffer:
    """Reassembles newline-terminated lines from notification chunks."""

    def __init__(self):
        self.buf = ""

    def feed(self, chunk: bytes) -> List[str]:
        try:
            self.buf += chunk.decode("utf-8")
        except UnicodeDecodeError:
            # the pending partial line lost its tail; never splice it onto the next chunk
            logger.warning("Dropping undecodable chunk (%d bytes)", len(chunk))
            self.buf = ""
            return []
        lines = []
        while "\n" in self.buf:
            line, self.buf = self.buf.split("\n", 1)
            line = line.strip()
            if line:
                lines.append(line)
        return lines

    def clear(self):
        self.buf = ""


def status_text(status: int) -> str:
    return STATUS_TEXT.get(status, "UNKNOWN")


def format_sample(s: SensorSample) -> str:
    return (f"#{s.seq} | T:{s.timestamp} | "
            f"FSR:[{','.join(str(v) for v in s.fsr)}] | "
            f"ACC:[{','.join(str(v) for v in s.accel)}] | "
            f"GYR:[{','.join(str(v) for v in s.gyro)}] | "
            f"TEMP:{s.temperature}°C | {status_text(s.status)}")
