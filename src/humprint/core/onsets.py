"""
Onset detection module.

Finds attack/beat events as local peaks of the energy envelope that rise
above a trailing moving average.
"""

import logging
from typing import Optional

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.envelope import EnergyEnvelope

logger = logging.getLogger(__name__)


class OnsetDetector:
    """
    Detects onsets on a normalized energy envelope.

    An envelope index is a candidate when it exceeds
    ``trailing_mean * onset_ratio + onset_offset`` and is a local peak.
    Candidates closer than ``min_onset_gap_ms`` to the previously accepted
    onset are dropped, so the output is strictly increasing with gaps larger
    than the minimum.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    def candidates(self, values: np.ndarray) -> np.ndarray:
        """
        Indices of the envelope that pass the threshold and peak tests.

        Args:
            values: Normalized envelope values.

        Returns:
            Ascending integer array of candidate indices.
        """
        window = self.cfg.onset_window
        n = len(values)
        if n < window + 2:
            return np.array([], dtype=int)

        # Mean of values[i - window:i] for every i in [window, n - 2]
        idx = np.arange(window, n - 1)
        windows = np.lib.stride_tricks.sliding_window_view(values, window)
        trailing = windows[: len(idx)].mean(axis=1)
        threshold = trailing * self.cfg.onset_ratio + self.cfg.onset_offset

        current = values[idx]
        is_peak = (
            (current > threshold)
            & (current > values[idx - 1])
            & (current >= values[idx + 1])
        )
        return idx[is_peak]

    def detect(self, envelope: EnergyEnvelope) -> np.ndarray:
        """
        Detect onset timestamps.

        Args:
            envelope: Energy envelope from :func:`compute_envelope`.

        Returns:
            Onset times in milliseconds from buffer start.
        """
        min_gap = self.cfg.min_onset_gap_ms
        onsets: list[float] = []
        for index in self.candidates(envelope.values):
            time_ms = envelope.index_to_ms(int(index))
            if onsets and time_ms - onsets[-1] <= min_gap:
                continue
            onsets.append(time_ms)

        logger.debug("onsets: %d accepted", len(onsets))
        return np.array(onsets, dtype=np.float64)
