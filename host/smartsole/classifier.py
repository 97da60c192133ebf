# classifier.py
import logging
from typing import List, Protocol, Sequence

import numpy as np

from .config import (
    FSR_FULL_SCALE, MODEL_LABELS, NUM_FSR, BALL_CHANNEL, HEEL_CHANNELS,
    RULE_IDLE_PRESSURE, RULE_BRISK_SUM, RULE_BRISK_VAR, RULE_WALK_SUM, RULE_WALK_VAR,
    RULE_STAND_SUM, RULE_STAND_VAR, RULE_STAIRS_MAX,
)

logger = logging.getLogger(__name__)


class ClassifierUnavailable(RuntimeError):
    """Backend could not be imported or its model could not be loaded."""


class NoMatch(Exception):
    """Backend saw the window but has no label for it."""


class Classifier(Protocol):
    def classify(self, tensor: np.ndarray) -> Sequence[float]:
        """(1, window, features) float32 in -> raw scores in MODEL_LABELS order."""
        ...

# =========================== TFLite backend ===========================

class TFLiteClassifier:
    def __init__(self, model_path: str):
        try:
            import tensorflow as tf
        except ImportError as e:
            raise ClassifierUnavailable(f"tensorflow not installed: {e}") from e
        try:
            self.interpreter = tf.lite.Interpreter(model_path=str(model_path))
            self.interpreter.allocate_tensors()
        except (ValueError, OSError, RuntimeError) as e:
            raise ClassifierUnavailable(f"cannot load model {model_path}: {e}") from e
        self.input_details = self.interpreter.get_input_details()
        self.output_details = self.interpreter.get_output_details()
        logger.info("Loaded TFLite model %s input=%s", model_path, self.input_details[0]["shape"])

    def classify(self, tensor: np.ndarray) -> List[float]:
        data = np.asarray(tensor, dtype=np.float32)
        self.interpreter.set_tensor(self.input_details[0]["index"], data)
        self.interpreter.invoke()
        output = self.interpreter.get_tensor(self.output_details[0]["index"])
        return [float(x) for x in output.flatten()]

# =========================== Rule-based (legacy) ===========================

def _one_hot(label: str) -> List[float]:
    return [1.0 if l == label else 0.0 for l in MODEL_LABELS]


class RuleBasedClassifier:
    """
    Earlier pressure-threshold heuristic. Only looks at the newest timestep
    of the window, de-normalized back to raw FSR counts. Returns one-hot
    scores, or raises NoMatch when no rule applies.
    """

    def classify(self, tensor: np.ndarray) -> List[float]:
        latest = np.asarray(tensor, dtype=np.float64).reshape(-1, np.shape(tensor)[-1])[-1]
        fsr = latest[:NUM_FSR] * FSR_FULL_SCALE

        if np.all(fsr < RULE_IDLE_PRESSURE):
            return _one_hot("Sitting")

        total = float(fsr.sum())
        variance = float(fsr.var())
        peak = float(fsr.max())

        if total > RULE_BRISK_SUM and variance > RULE_BRISK_VAR:
            return _one_hot("Walking")
        if total > RULE_WALK_SUM and variance > RULE_WALK_VAR:
            return _one_hot("Walking")
        if total > RULE_STAND_SUM and variance < RULE_STAND_VAR:
            return _one_hot("Standing")
        if peak > RULE_STAIRS_MAX and fsr[BALL_CHANNEL] > fsr[HEEL_CHANNELS[0]]:
            return _one_hot("Stairs")
        raise NoMatch(f"no rule for total={total:.0f} var={variance:.0f} peak={peak:.0f}")
