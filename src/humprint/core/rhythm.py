"""Rhythm classification from onset-interval regularity."""

import logging
from typing import Optional

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

RHYTHMS = ("straight", "swing", "syncopated")


class RhythmClassifier:
    """
    Label onset timing as straight, swing, or syncopated.

    Swing is a long-short alternation of consecutive intervals; syncopation
    is plain irregularity measured by the coefficient of variation.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    @staticmethod
    def coefficient_of_variation(intervals: np.ndarray) -> float:
        """Population standard deviation over mean (0 when the mean is 0)."""
        mean = float(np.mean(intervals))
        if mean == 0:
            return 0.0
        return float(np.std(intervals)) / mean

    def swing_score(self, intervals: np.ndarray) -> float:
        """
        Fraction of (even, odd) interval pairs with a long-short ratio.

        Needs at least four intervals; fewer score 0.
        """
        if len(intervals) < 4:
            return 0.0
        swung = 0
        for i in range(0, len(intervals) - 1, 2):
            longer, shorter = intervals[i], intervals[i + 1]
            if shorter == 0:
                shorter = longer
            if shorter == 0:
                continue
            ratio = longer / shorter
            if self.cfg.swing_ratio_low < ratio < self.cfg.swing_ratio_high:
                swung += 1
        return swung / (len(intervals) // 2)

    def classify(self, onsets: np.ndarray) -> str:
        """
        Classify the rhythm of an onset sequence.

        Args:
            onsets: Onset times in milliseconds.

        Returns:
            "swing", "syncopated", or "straight" (also the default for fewer
            than three onsets).
        """
        onsets = np.asarray(onsets, dtype=np.float64)
        if len(onsets) < 3:
            return "straight"

        intervals = np.diff(onsets)
        cv = self.coefficient_of_variation(intervals)
        swing = self.swing_score(intervals)
        logger.debug("rhythm: %d intervals, cv=%.3f swing=%.2f", len(intervals), cv, swing)

        if swing > self.cfg.swing_threshold:
            return "swing"
        if cv > self.cfg.syncopation_cv:
            return "syncopated"
        return "straight"
