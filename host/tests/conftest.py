import pytest

from smartsole.models import SensorSample


@pytest.fixture
def make_sample():
    def _make(seq=0, ts=0, fsr=(0, 0, 0, 0, 0, 0), accel=(0, 0, 16384), gyro=(0, 0, 0)):
        return SensorSample(seq=seq, timestamp=ts, fsr=tuple(fsr), accel=tuple(accel), gyro=tuple(gyro))
    return _make
