"""
Melodic contour module.

Splits the recording into equal segments, estimates a pitch height for each
from its zero-crossing rate, and reads the overall direction from a
least-squares trend plus a count of direction changes.
"""

import logging
from typing import Optional

import numpy as np
from scipy import stats

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.buffer import SampleBuffer

logger = logging.getLogger(__name__)

CONTOURS = ("ascending", "descending", "oscillating")


class ContourDetector:
    """Classify a recording as ascending, descending, or oscillating."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    def segment_pitches(self, buffer: SampleBuffer) -> np.ndarray:
        """
        Zero-crossing pitch proxy for each contiguous segment.

        Segments are ``n // contour_segments`` samples long and never
        overlap; samples past the last full segment are ignored.

        Returns:
            Array of estimated frequencies in Hz, one per segment.
        """
        n_segments = self.cfg.contour_segments
        length = buffer.n_samples // n_segments
        if length == 0:
            return np.zeros(n_segments)

        pitches = np.zeros(n_segments)
        for seg in range(n_segments):
            segment = buffer.samples[seg * length:(seg + 1) * length]
            # Zero counts as positive
            positive = segment >= 0
            crossings = np.count_nonzero(positive[1:] != positive[:-1])
            pitches[seg] = crossings * buffer.sample_rate / (2 * length)
        return pitches

    @staticmethod
    def direction_changes(pitches: np.ndarray) -> int:
        """Number of strict up/down reversals in consecutive differences."""
        steps = np.sign(np.diff(pitches))
        return int(np.count_nonzero(steps[1:] * steps[:-1] < 0))

    @staticmethod
    def normalized_slope(pitches: np.ndarray) -> float:
        """Least-squares slope over segment index, relative to mean pitch."""
        average = float(np.mean(pitches))
        if average <= 0:
            return 0.0
        fit = stats.linregress(np.arange(len(pitches)), pitches)
        return float(fit.slope) / average

    def classify(self, pitches: np.ndarray) -> str:
        """
        Read the contour from per-segment pitch estimates.

        Returns:
            "ascending", "descending", or "oscillating". Flat or ambiguous
            trends are reported as oscillating.
        """
        changes = self.direction_changes(pitches)
        slope = self.normalized_slope(pitches)
        logger.debug("contour: pitches=%s changes=%d slope=%.4f",
                     np.round(pitches, 1).tolist(), changes, slope)

        if changes >= 2:
            return "oscillating"
        if slope > self.cfg.contour_slope:
            return "ascending"
        if slope < -self.cfg.contour_slope:
            return "descending"
        return "oscillating"

    def detect(self, buffer: SampleBuffer) -> str:
        """Detect the melodic contour of a buffer."""
        return self.classify(self.segment_pitches(buffer))
