"""Tempo estimation from onset timing."""

import logging
from typing import Optional

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.rounding import round_half_up

logger = logging.getLogger(__name__)


class TempoEstimator:
    """Convert onset times into a BPM estimate."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    def fold(self, bpm: float) -> float:
        """
        Fold octave errors into the plausible tempo range.

        Halves while above ``max_bpm`` and then doubles while below
        ``min_bpm``, so eighth-note detections come back as quarter notes.
        """
        while bpm > self.cfg.max_bpm:
            bpm /= 2
        while bpm < self.cfg.min_bpm:
            bpm *= 2
        return bpm

    def estimate(self, onsets: np.ndarray) -> int:
        """
        Estimate tempo from onset times.

        Args:
            onsets: Onset times in milliseconds, ascending.

        Returns:
            Integer BPM within [min_bpm, max_bpm], or ``default_bpm`` when
            fewer than two onsets are available.
        """
        onsets = np.asarray(onsets, dtype=np.float64)
        if len(onsets) < 2:
            logger.debug("tempo: %d onsets, using default %d", len(onsets), self.cfg.default_bpm)
            return self.cfg.default_bpm

        intervals = np.sort(np.diff(onsets))
        # Upper-middle element for even counts
        median = float(intervals[len(intervals) // 2])
        if median <= 0:
            return self.cfg.default_bpm

        bpm = self.fold(60000.0 / median)
        logger.debug("tempo: median interval %.1f ms -> %.2f bpm", median, bpm)
        return int(round_half_up(bpm))
