# store.py
import json
import logging
import os
import threading
from typing import List, Optional

from .models import ActivitySession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Finished sessions as JSON lines, one session per line, oldest first.
    Deleting rewrites the file.
    """

    def __init__(self, path: str):
        self.path = path
        self.lock = threading.Lock()

    def save(self, session: ActivitySession):
        line = json.dumps(session.to_dict(), separators=(",", ":"))
        with self.lock:
            with open(self.path, "a", buffering=1) as f:
                f.write(line + "\n")
        logger.info("Saved session %s to %s", session.id, self.path)

    def _read(self) -> List[ActivitySession]:
        if not os.path.exists(self.path):
            return []
        out = []
        with open(self.path) as f:
            for n, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    out.append(ActivitySession.from_dict(json.loads(line)))
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning("Skipping corrupt session at %s:%d (%s)", self.path, n, e)
        return out

    def list(self) -> List[ActivitySession]:
        with self.lock:
            return self._read()

    def get(self, session_id: str) -> Optional[ActivitySession]:
        for s in self.list():
            if s.id == session_id:
                return s
        return None

    def delete(self, session_id: str) -> bool:
        with self.lock:
            sessions = self._read()
            keep = [s for s in sessions if s.id != session_id]
            if len(keep) == len(sessions):
                return False
            tmp = self.path + ".tmp"
            with open(tmp, "w") as f:
                for s in keep:
                    f.write(json.dumps(s.to_dict(), separators=(",", ":")) + "\n")
            os.replace(tmp, self.path)
        logger.info("Deleted session %s", session_id)
        return True
