from smartsole.models import ActivitySession, ClassificationResult, SessionRecord
from smartsole.store import SessionStore


def _session(sid, make_sample):
    rec = SessionRecord(make_sample(seq=1, ts=50, fsr=(1, 2, 3, 4, 5, 6)), ClassificationResult("Standing", 0.7))
    return ActivitySession(id=sid, started_at=1.0, ended_at=2.5, records=(rec,), total_steps=3,
                           on_feet_ms=1200, breakdown={"Standing": {"ms": 0.0, "pct": 0.0}})


def test_save_list_roundtrip(tmp_path, make_sample):
    store = SessionStore(str(tmp_path / "s.jsonl"))
    assert store.list() == []
    a = _session("a", make_sample)
    store.save(a)
    store.save(_session("b", make_sample))
    got = store.list()
    assert [s.id for s in got] == ["a", "b"]
    assert got[0] == a
    assert store.get("b").total_steps == 3
    assert store.get("zzz") is None


def test_delete(tmp_path, make_sample):
    store = SessionStore(str(tmp_path / "s.jsonl"))
    for sid in ("a", "b", "c"):
        store.save(_session(sid, make_sample))
    assert store.delete("b") is True
    assert store.delete("b") is False
    assert [s.id for s in store.list()] == ["a", "c"]


def test_corrupt_lines_are_skipped(tmp_path, make_sample, caplog):
    path = tmp_path / "s.jsonl"
    store = SessionStore(str(path))
    store.save(_session("a", make_sample))
    with open(path, "a") as f:
        f.write("{not json\n")
        f.write('{"id": "x"}\n')
    assert [s.id for s in store.list()] == ["a"]
    assert "Skipping corrupt session" in caplog.text
