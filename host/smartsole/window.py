# window.py
import logging
import math
from collections import deque
from typing import Deque, List, Optional, Sequence

import numpy as np

from .classifier import Classifier, NoMatch
from .config import MODEL_LABELS, NUM_FEATURES, WINDOW_SIZE
from .features import FeatureVector, normalize
from .models import ClassificationResult, SensorSample

logger = logging.getLogger(__name__)


def softmax(scores: Sequence[float]) -> List[float]:
    """
    Stable softmax. If the exponent sum degenerates (zero / inf / nan),
    the raw scores are taken as already-normalized probabilities.
    """
    m = max(scores)
    try:
        exps = [math.exp(s - m) for s in scores]
        total = sum(exps)
    except (OverflowError, ValueError):
        total = float("nan")
    if total == 0.0 or not math.isfinite(total):
        return [float(s) for s in scores]
    return [e / total for e in exps]


def decode(scores: Sequence[float]) -> ClassificationResult:
    if len(scores) != len(MODEL_LABELS):
        raise ValueError(f"expected {len(MODEL_LABELS)} scores, got {len(scores)}")
    if not all(math.isfinite(s) for s in scores):
        raise ValueError(f"non-finite scores: {list(scores)}")
    probs = softmax(scores)
    best = max(range(len(probs)), key=lambda i: probs[i])
    conf = min(max(float(probs[best]), 0.0), 1.0)
    return ClassificationResult(MODEL_LABELS[best], conf)


class WindowedClassifier:
    """
    Rolling 20-sample window in front of an opaque classifier.

    submit() returns None until the window is full, then one result per
    sample: the window keeps sliding (oldest evicted) and is only emptied
    by reset().
    """

    def __init__(self, classifier: Optional[Classifier] = None, size: int = WINDOW_SIZE):
        self.classifier = classifier
        self.size = size
        self.window: Deque[FeatureVector] = deque(maxlen=size)
        self.submitted = 0
        self.classified = 0
        self.failures = 0

    def __len__(self) -> int:
        return len(self.window)

    @property
    def is_full(self) -> bool:
        return len(self.window) == self.size

    def tensor(self) -> np.ndarray:
        # (batch=1, timesteps, features), oldest first
        return np.asarray(list(self.window), dtype=np.float32).reshape(1, self.size, NUM_FEATURES)

    def submit(self, sample: SensorSample) -> Optional[ClassificationResult]:
        self.window.append(normalize(sample))
        self.submitted += 1
        if not self.is_full:
            return None

        if self.classifier is None:
            self.failures += 1
            logger.debug("No classifier configured; seq=%s -> Unknown", sample.seq)
            return ClassificationResult.unknown()

        try:
            scores = self.classifier.classify(self.tensor())
            result = decode([float(s) for s in scores])
        except NoMatch as e:
            self.classified += 1
            logger.debug("No label at seq=%s: %s", sample.seq, e)
            return ClassificationResult.unknown()
        except Exception:
            self.failures += 1
            logger.exception("Classifier invocation failed (non-fatal) at seq=%s", sample.seq)
            return ClassificationResult.unknown()

        self.classified += 1
        return result

    def reset(self):
        self.window.clear()
        self.submitted = 0
        self.classified = 0
        self.failures = 0
