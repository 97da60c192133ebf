import argparse
import asyncio
import datetime as dt
import json
import logging
from typing import Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .classifier import ClassifierUnavailable, RuleBasedClassifier, TFLiteClassifier
from .config import DEFAULT_LOG, DEFAULT_STORE, DEVICE_NAME, KCAL_PER_STEP, STEP_LENGTH_M
from .models import ActivitySession, SensorSample
from .session import TrackingSession, TrackingUpdate
from .stats import DailyStatsTracker, insights
from .steps import StepDetector, format_duration
from .store import SessionStore
from .window import WindowedClassifier

console = Console()
logger = logging.getLogger("smartsole")


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _make_classifier(model: Optional[str], rules: bool):
    if rules:
        return RuleBasedClassifier()
    if not model:
        logger.warning("No model given; activity will read as Unknown")
        return None
    try:
        return TFLiteClassifier(model)
    except ClassifierUnavailable as e:
        logger.error("Classifier unavailable, continuing without it: %s", e)
        return None


def _make_session(args) -> TrackingSession:
    adapter = WindowedClassifier(_make_classifier(args.model, args.rules))
    return TrackingSession(adapter, StepDetector(), store=SessionStore(args.store))


def _print_update(u: Optional[TrackingUpdate]):
    if u is None or u.result is None:
        return
    console.log(f"#{u.seq} [bold]{u.result.label}[/bold] "
                f"{u.result.confidence:.0%} | steps {u.steps} ({u.cadence:.0f}/min) | "
                f"{u.distance_m:.0f} m | {u.calories:.1f} kcal | on feet {u.on_feet}")


def _print_summary(session: ActivitySession):
    t = Table(title=f"Session {session.id[:8]}")
    t.add_column("Activity")
    t.add_column("Time", justify="right")
    t.add_column("Share", justify="right")
    for label, b in session.breakdown.items():
        t.add_row(label, f"{b['ms'] / 1000:.1f}s", f"{b['pct']:.1f}%")
    console.print(t)
    console.print(f"Steps: {session.total_steps}   On feet: {format_duration(session.on_feet_ms)}   "
                  f"Active periods: {session.active_periods}   "
                  f"Distance: {session.total_steps * STEP_LENGTH_M:.0f} m   "
                  f"Calories: {session.total_steps * KCAL_PER_STEP:.1f} kcal   "
                  f"Duration: {session.duration_s:.0f}s   Samples: {len(session.records)}")


def _print_today(store: SessionStore):
    today = dt.date.today()
    tracker = DailyStatsTracker()
    for s in store.list():
        if dt.datetime.fromtimestamp(s.started_at).date() == today:
            tracker.add_session(s)
    st = tracker.stats
    console.print(f"Today: {st.steps} steps, {st.time_on_feet_formatted} on feet, "
                  f"{st.distance_km:.2f} km, {st.calories} kcal, {st.active_sessions} sessions")
    for line in insights(st):
        console.print(f"  • {line}")

# =========================== Commands ===========================

async def _track(args):
    from bleak.exc import BleakError
    from smartsole_ble.client import stream_samples
    from smartsole_ble.json_writer import JSONLinesWriter

    session = _make_session(args)
    stop_event = asyncio.Event()

    def on_sample(sample: SensorSample):
        _print_update(session.process(sample))

    writer = JSONLinesWriter(args.log) if args.log else None
    session.start()
    stream = asyncio.create_task(stream_samples(on_sample, args.name, args.address, writer, stop_event))
    console.print("Tracking... press ENTER to stop")
    waiter = asyncio.create_task(asyncio.to_thread(input))
    try:
        await asyncio.wait({stream, waiter}, return_when=asyncio.FIRST_COMPLETED)
        stop_event.set()
        await stream
    except (RuntimeError, BleakError) as e:
        logger.error("BLE link failed: %s", e)
    finally:
        if writer is not None:
            writer.close()
        _print_summary(session.stop())
        _print_today(session.store)
        if not waiter.done():
            console.print("Link closed; press ENTER to exit")


def read_log(path: str) -> Iterator[SensorSample]:
    with open(path) as f:
        for n, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                yield SensorSample.from_dict(json.loads(line))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning("Skipping bad log line %d: %s", n, e)


def cmd_track(args):
    asyncio.run(_track(args))


def cmd_replay(args):
    session = _make_session(args)
    session.start()
    for sample in read_log(args.log):
        u = session.process(sample)
        if args.verbose:
            _print_update(u)
    _print_summary(session.stop())
    _print_today(session.store)


def cmd_sessions(args):
    store = SessionStore(args.store)
    if args.action == "delete":
        if not args.id:
            raise SystemExit("sessions delete needs an ID")
        ok = store.delete(args.id)
        console.print("deleted" if ok else f"[red]no session {args.id}[/red]")
        return

    t = Table(title=args.store)
    for col in ("ID", "Started", "Duration", "Steps", "On feet", "Mostly"):
        t.add_column(col)
    for s in store.list():
        t.add_row(s.id, dt.datetime.fromtimestamp(s.started_at).strftime("%Y-%m-%d %H:%M"),
                  f"{s.duration_s:.0f}s", str(s.total_steps),
                  format_duration(s.on_feet_ms), s.dominant_activity)
    console.print(t)


def build_parser() -> argparse.ArgumentParser:
    # accepted before or after the subcommand; SUPPRESS keeps the top-level value
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS)
    common.add_argument("--store", default=argparse.SUPPRESS, help="session store (JSONL)")

    p = argparse.ArgumentParser(prog="smartsole")
    p.add_argument("-v", "--verbose", action="store_true")
    p.add_argument("--store", default=DEFAULT_STORE, help="session store (JSONL)")
    sub = p.add_subparsers(dest="command", required=True)

    def add_model(sp):
        g = sp.add_mutually_exclusive_group()
        g.add_argument("--model", help=".tflite activity model")
        g.add_argument("--rules", action="store_true", help="use the legacy threshold classifier")

    t = sub.add_parser("track", parents=[common], help="live tracking from the insole")
    t.add_argument("--name", default=DEVICE_NAME, help="BLE name")
    t.add_argument("--address", help="BLE MAC/address")
    t.add_argument("--log", default=DEFAULT_LOG, help="raw sample JSONL output ('' to disable)")
    add_model(t)
    t.set_defaults(func=cmd_track)

    r = sub.add_parser("replay", parents=[common], help="run a recorded sample log through the pipeline")
    r.add_argument("log")
    add_model(r)
    r.set_defaults(func=cmd_replay)

    s = sub.add_parser("sessions", parents=[common], help="list or delete stored sessions")
    s.add_argument("action", choices=["list", "delete"])
    s.add_argument("id", nargs="?")
    s.set_defaults(func=cmd_sessions)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
