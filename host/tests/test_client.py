from smartsole_ble.client import make_notify_handler
from smartsole_ble.json_writer import JSONLinesWriter

LINE = "1,1000,10,20,30,40,50,60,0,0,16384,0,0,0,25.0,0"


def test_notify_handler_delivers_samples_in_order():
    got = []
    handler = make_notify_handler(got.append)
    handler(None, bytearray(LINE[:20].encode()))
    handler(None, bytearray((LINE[20:] + "\ngarbage\n").encode()))
    handler(None, bytearray(LINE.replace("1,1000", "2,1050", 1).encode() + b"\n"))
    assert [s.seq for s in got] == [1, 2]


def test_notify_handler_logs_raw_samples(tmp_path):
    path = tmp_path / "raw.jsonl"
    got = []
    with JSONLinesWriter(str(path)) as w:
        handler = make_notify_handler(got.append, w)
        handler(None, bytearray((LINE + "\n").encode()))
    text = path.read_text()
    assert '"seq":1' in text and '"fsr":[10,20,30,40,50,60]' in text
    assert len(got) == 1
