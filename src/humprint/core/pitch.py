"""
Pitch detection module.

Estimates the dominant frequency of a recording with normalized
autocorrelation over a segment taken from the middle of the buffer, then
maps it to one of the twelve chromatic pitch classes. The octave is not
reported; humming is rarely in tune, so detection is deliberately coarse.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.buffer import SampleBuffer
from humprint.core.rounding import round_half_up

logger = logging.getLogger(__name__)

CHROMA_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Equal-tempered reference frequencies of octave 4, in CHROMA_NAMES order.
REFERENCE_FREQUENCIES = np.array(
    [261.63, 277.18, 293.66, 311.13, 329.63, 349.23,
     369.99, 392.00, 415.30, 440.00, 466.16, 493.88]
)


@dataclass(frozen=True)
class PitchEstimate:
    """Dominant pitch of a recording."""

    frequency_hz: float  # unfolded, rounded to 0.1 Hz
    note_name: str       # one of CHROMA_NAMES


def fold_to_octave(
    frequency: float,
    low: float = 261.63,
    high: float = 523.25,
) -> float:
    """Double or halve a positive frequency until it lies in [low, high)."""
    while frequency < low:
        frequency *= 2
    while frequency >= high:
        frequency /= 2
    return frequency


def frequency_to_note(
    frequency: float,
    config: Optional[AnalysisConfig] = None,
) -> str:
    """
    Map a frequency to the nearest chromatic pitch class.

    Args:
        frequency: Frequency in Hz.
        config: Supplies the reference octave bounds.

    Returns:
        Note name from CHROMA_NAMES. Non-positive input maps to "C".
    """
    cfg = config or DEFAULT_CONFIG
    if not frequency > 0:
        return CHROMA_NAMES[0]
    folded = fold_to_octave(frequency, cfg.reference_low, cfg.reference_high)
    # argmin keeps the first of equally distant candidates
    index = int(np.argmin(np.abs(REFERENCE_FREQUENCIES - folded)))
    return CHROMA_NAMES[index]


class PitchDetector:
    """
    Autocorrelation pitch detector.

    Lags between ``sr / pitch_fmax`` and ``sr / pitch_fmin`` samples are
    scored with normalized autocorrelation on at most ``max_compare``
    sample pairs each; the best lag gives the period.

    With ``pitch_peak_tolerance=0`` the selection is the plain first
    maximum over all scored lags.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    def center_segment(self, buffer: SampleBuffer) -> np.ndarray:
        """Return up to ``pitch_window_seconds`` of audio centred in the buffer."""
        n = buffer.n_samples
        length = min(n, int(buffer.sample_rate * self.cfg.pitch_window_seconds))
        start = (n - length) // 2
        return buffer.samples[start:start + length]

    def lag_range(self, sample_rate: int, segment_length: int) -> tuple[int, int]:
        """Inclusive (min_lag, max_lag) searched for a segment."""
        min_lag = max(1, int(round_half_up(sample_rate / self.cfg.pitch_fmax)))
        max_lag = min(int(round_half_up(sample_rate / self.cfg.pitch_fmin)), segment_length // 2)
        return min_lag, max_lag

    def correlations(self, segment: np.ndarray, min_lag: int, max_lag: int) -> np.ndarray:
        """
        Normalized autocorrelation for each lag in [min_lag, max_lag].

        A zero denominator (silence) scores 0 rather than raising.
        """
        scores = np.zeros(max(0, max_lag - min_lag + 1))
        for k, lag in enumerate(range(min_lag, max_lag + 1)):
            compare = min(len(segment) - lag, self.cfg.max_compare)
            head = segment[:compare]
            shifted = segment[lag:lag + compare]
            norm = np.sqrt(np.dot(head, head) * np.dot(shifted, shifted))
            if norm > 0:
                scores[k] = np.dot(head, shifted) / norm
        return scores

    def select_lag(self, scores: np.ndarray) -> int:
        """
        Index of the winning lag in ``scores``.

        The first local peak scoring within ``pitch_peak_tolerance`` of the
        best score wins. A pure tone correlates almost perfectly at every
        whole multiple of its period, and whichever multiple lands closest
        to an integer lag would otherwise win by a hair.
        """
        best = float(scores.max())
        floor = best - self.cfg.pitch_peak_tolerance
        last = len(scores) - 1
        for k, score in enumerate(scores):
            if score < floor:
                continue
            if k > 0 and score < scores[k - 1]:
                continue
            if k < last and score < scores[k + 1]:
                continue
            return k
        return int(np.argmax(scores))

    def detect(self, buffer: SampleBuffer) -> PitchEstimate:
        """
        Estimate the dominant pitch of a buffer.

        Args:
            buffer: Input recording.

        Returns:
            PitchEstimate with the detected frequency and its note name.
        """
        sr = buffer.sample_rate
        segment = self.center_segment(buffer)
        min_lag, max_lag = self.lag_range(sr, len(segment))

        best_lag = min_lag
        if max_lag >= min_lag:
            scores = self.correlations(segment, min_lag, max_lag)
            best_lag = min_lag + self.select_lag(scores)
            logger.debug(
                "pitch: lag %d (corr %.3f) over %d..%d",
                best_lag, scores[best_lag - min_lag], min_lag, max_lag,
            )
        else:
            logger.debug("pitch: segment of %d samples too short, using lag %d",
                         len(segment), min_lag)

        frequency = sr / best_lag
        return PitchEstimate(
            frequency_hz=round_half_up(frequency, 1),
            note_name=frequency_to_note(frequency, self.cfg),
        )
