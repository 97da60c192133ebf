from smartsole.steps import StepDetector, format_duration

LOW = (25, 25, 25, 25, 0, 0)       # step channels sum 100
HIGH = (225, 225, 225, 225, 0, 0)  # step channels sum 900
MOVING = (0, 12000, 16000)         # |a| = 20000
STILL = (0, 0, 0)


def _alternate(make_sample, period_ms, cycles, start=10_000, accel=MOVING, high=HIGH):
    out = []
    half = period_ms // 2
    for i in range(cycles):
        t = start + i * period_ms
        out.append(make_sample(seq=2 * i, ts=t, fsr=LOW, accel=accel))
        out.append(make_sample(seq=2 * i + 1, ts=t + half, fsr=high, accel=accel))
    return out


def test_one_step_per_cycle(make_sample):
    det = StepDetector()
    counts = [det.process_sample(s)[0] for s in _alternate(make_sample, 400, 10)]
    assert counts[-1] == 10
    assert counts == sorted(counts)


def test_debounce_drops_fast_steps(make_sample):
    det = StepDetector()
    for s in _alternate(make_sample, 200, 10):
        det.process_sample(s)
    assert det.total_steps == 5


def test_needs_corroborating_signal(make_sample):
    # no heel or midfoot load, accel at rest
    toe_only = (450, 450, 0, 0, 0, 0)
    det = StepDetector()
    for s in _alternate(make_sample, 400, 5, accel=STILL, high=toe_only):
        det.process_sample(s)
    assert det.total_steps == 0

    det.reset()
    for s in _alternate(make_sample, 400, 5, accel=MOVING, high=toe_only):
        det.process_sample(s)
    assert det.total_steps == 5


def test_heel_channels_do_not_count(make_sample):
    det = StepDetector()
    for i in range(10):
        fsr = (0, 0, 0, 0, 900, 900) if i % 2 else (0,) * 6
        det.process_sample(make_sample(seq=i, ts=10_000 + i * 400, fsr=fsr, accel=MOVING))
    assert det.total_steps == 0


def test_on_feet_duration_commits_on_release(make_sample):
    stand = (100,) * 6   # total 600, step sum 400: no steps
    det = StepDetector()
    det.process_sample(make_sample(ts=0, fsr=(0,) * 6))
    for t in range(1000, 91000, 1000):
        det.process_sample(make_sample(ts=t, fsr=stand))
    assert det.state.on_feet
    assert det.state.on_feet_total_ms == 0
    det.process_sample(make_sample(ts=91000, fsr=(0,) * 6))
    assert not det.state.on_feet
    assert abs(det.state.on_feet_total_ms - 90_000) <= 1000
    assert det.state.active_periods == 1


def test_open_interval_included_in_output(make_sample):
    stand = (100,) * 6
    det = StepDetector()
    det.process_sample(make_sample(ts=0, fsr=stand))
    _, text = det.process_sample(make_sample(ts=61 * 60_000, fsr=stand))
    assert text == "1h 1m"
    assert det.state.on_feet_total_ms == 0
    assert det.flush() == 61 * 60_000


def test_cadence_distance_calories(make_sample):
    det = StepDetector()
    for s in _alternate(make_sample, 500, 11):
        det.process_sample(s)
    assert det.total_steps == 11
    assert det.cadence() == 120.0
    assert det.distance_m == 11 * 0.78
    assert det.calories == 11 * 0.04


def test_reset_clears_everything(make_sample):
    det = StepDetector()
    for s in _alternate(make_sample, 400, 5):
        det.process_sample(s)
    det.reset()
    assert det.total_steps == 0
    assert det.on_feet_ms() == 0
    assert not det.state.on_feet
    assert len(det.state.recent_steps) == 0


def test_format_duration():
    assert format_duration(0) == "0h 0m"
    assert format_duration(59_999) == "0h 0m"
    assert format_duration(3_660_000) == "1h 1m"


def test_first_step_counts_from_device_boot(make_sample):
    det = StepDetector()
    for s in _alternate(make_sample, 400, 10, start=0):
        det.process_sample(s)
    assert det.total_steps == 10


def test_cadence_buffer_stays_bounded(make_sample):
    det = StepDetector()
    for s in _alternate(make_sample, 400, 600):
        det.process_sample(s)
    assert det.total_steps == 600
    # only the last minute of steps is retained
    assert len(det.state.recent_steps) == 151
    assert det.cadence() == 150.0
