# config.py

# ---------------- BLE device ----------------
DEVICE_NAME = "nRF52-Sensors"   # advertised name of the insole board
SCAN_TIMEOUT_S = 10.0

# ---------------- Channel layout ----------------
# Order here must match the order the firmware sends FSR channels
CHANNEL_LABELS = ["Toe", "Ball", "Arch", "Mid", "Heel Front", "Heel Back"]
NUM_FSR = len(CHANNEL_LABELS)

STEP_CHANNELS = (0, 1, 2, 3)     # heel channels carry static shoe weight
HEEL_CHANNELS = (4, 5)
MIDFOOT_CHANNELS = (2, 3)
BALL_CHANNEL = 1

# ---------------- Normalization ----------------
FSR_FULL_SCALE = 1024.0
IMU_FULL_SCALE = 16384.0         # +-2 g / +-250 dps raw range
NUM_FEATURES = 12

# ---------------- Classifier ----------------
WINDOW_SIZE = 20                 # ~1 s at 20 Hz
# Output order of the trained model
MODEL_LABELS = ["Sitting", "Stairs", "Standing", "Walking"]
UNKNOWN_LABEL = "Unknown"
ACTIVITY_LABELS = ["Sitting", "Standing", "Walking", "Stairs", UNKNOWN_LABEL]

# ---------------- Step detection ----------------
PRESSURE_DELTA_THRESHOLD = 300
MIN_STEP_PRESSURE = 500
MIN_STEP_INTERVAL_MS = 300
ACCEL_MOVEMENT_THRESHOLD = 18000.0   # ~1.1 g, above gravity at rest
REGION_PRESSURE_FLOOR = 50

# ---------------- Time on feet ----------------
ON_FEET_THRESHOLD = 200          # total pressure across all channels

# ---------------- Daily stats ----------------
STEP_LENGTH_M = 0.78
KCAL_PER_STEP = 0.04
CADENCE_WINDOW_MS = 60_000

# ---------------- Rule-based classifier (legacy) ----------------
RULE_IDLE_PRESSURE = 50
RULE_BRISK_SUM, RULE_BRISK_VAR = 2000, 5000
RULE_WALK_SUM, RULE_WALK_VAR = 800, 2000
RULE_STAND_SUM, RULE_STAND_VAR = 300, 1000
RULE_STAIRS_MAX = 800

# ---------------- Files ----------------
DEFAULT_STORE = "smartsole_sessions.jsonl"
DEFAULT_LOG = "smartsole_samples.jsonl"
