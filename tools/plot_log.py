import json, sys
import matplotlib.pyplot as plt

from smartsole.config import STEP_CHANNELS, ON_FEET_THRESHOLD, ACCEL_MOVEMENT_THRESHOLD

# usage: python tools/plot_log.py < smartsole_samples.jsonl

ts, total, step, amag = [], [], [], []
for line in sys.stdin:
    try:
        j = json.loads(line)
        fsr = j["fsr"]
        ax, ay, az = j["accel"]
    except (ValueError, KeyError, TypeError):
        continue
    ts.append(j["timestamp"] / 1000.0)
    total.append(sum(fsr))
    step.append(sum(fsr[i] for i in STEP_CHANNELS))
    amag.append((ax * ax + ay * ay + az * az) ** 0.5)

fig, (top, bottom) = plt.subplots(2, 1, sharex=True)
top.plot(ts, total, label="total pressure")
top.plot(ts, step, label="step channels")
top.axhline(ON_FEET_THRESHOLD, ls="--", c="gray", lw=0.8)
top.legend()
top.set_ylabel("FSR counts")
bottom.plot(ts, amag, label="|accel|", c="tab:red")
bottom.axhline(ACCEL_MOVEMENT_THRESHOLD, ls="--", c="gray", lw=0.8)
bottom.set_ylabel("counts")
bottom.set_xlabel("device time (s)")
fig.suptitle("Insole log")
plt.show()
