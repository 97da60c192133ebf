import json, threading

class JSONLinesWriter:
    def __init__(self, path: str):
        self.path = path
        self.lock = threading.Lock()
        self._f = open(self.path, "a", buffering=1)

    def append(self, obj: dict):
        line = json.dumps(obj, separators=(",", ":"))
        with self.lock:
            self._f.write(line + "\n")

    def close(self):
        with self.lock:
            self._f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
