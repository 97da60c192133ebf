import json

from smartsole.cli import build_parser, main, read_log
from smartsole.config import DEFAULT_STORE
from smartsole.store import SessionStore


def _write_log(path, n=40):
    with open(path, "w") as f:
        for i in range(n):
            fsr = [225, 225, 225, 225, 0, 0] if i % 2 else [25, 25, 25, 25, 0, 0]
            f.write(json.dumps({"ts": 0.0, "seq": i, "timestamp": 10_000 + i * 200,
                                "fsr": fsr, "accel": [0, 0, 16384], "gyro": [0, 0, 0]}) + "\n")
        f.write("not json\n")


def test_read_log_skips_bad_lines(tmp_path):
    log = tmp_path / "log.jsonl"
    _write_log(log, 3)
    assert [s.seq for s in read_log(str(log))] == [0, 1, 2]


def test_replay_then_list_and_delete(tmp_path, capsys):
    log = tmp_path / "log.jsonl"
    store_path = str(tmp_path / "sessions.jsonl")
    _write_log(log)

    main(["--store", store_path, "replay", str(log), "--rules"])
    sessions = SessionStore(store_path).list()
    assert len(sessions) == 1
    assert sessions[0].total_steps == 20
    assert len(sessions[0].records) == 40

    main(["--store", store_path, "sessions", "list"])
    assert sessions[0].id[:8] in capsys.readouterr().out

    main(["--store", store_path, "sessions", "delete", sessions[0].id])
    assert SessionStore(store_path).list() == []


def test_model_and_rules_are_exclusive():
    p = build_parser()
    args = p.parse_args(["replay", "x.jsonl", "--rules"])
    assert args.rules and args.model is None


def test_shared_flags_after_subcommand(tmp_path, capsys):
    log = tmp_path / "log.jsonl"
    store_path = str(tmp_path / "sessions.jsonl")
    _write_log(log)

    main(["replay", str(log), "--rules", "--store", store_path, "-v"])
    sessions = SessionStore(store_path).list()
    assert len(sessions) == 1

    main(["sessions", "list", "--store", store_path])
    assert sessions[0].id[:8] in capsys.readouterr().out


def test_store_defaults_when_not_given():
    args = build_parser().parse_args(["sessions", "list"])
    assert args.store == DEFAULT_STORE
    assert args.verbose is False
