"""
Energy envelope module.

Turns raw samples into a coarse loudness-over-time curve: one RMS value per
non-overlapping 10 ms hop, normalized so the loudest hop is 1.0.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import librosa
import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.buffer import SampleBuffer
from humprint.core.rounding import round_half_up

logger = logging.getLogger(__name__)

# Divisor floor for peak normalization of silent buffers.
PEAK_FLOOR = 0.0001


@dataclass(frozen=True)
class EnergyEnvelope:
    """Normalized per-hop RMS curve."""

    values: np.ndarray  # Shape: (n_hops,), max 1.0 unless silent
    hop_length: int     # samples per hop
    sample_rate: int

    def __len__(self) -> int:
        return len(self.values)

    @property
    def hop_ms(self) -> float:
        """Hop duration in milliseconds."""
        return self.hop_length * 1000.0 / self.sample_rate

    def index_to_ms(self, index: int) -> float:
        """Convert an envelope index to a timestamp in milliseconds."""
        return index * self.hop_length * 1000.0 / self.sample_rate


def compute_hop_length(sample_rate: int, hop_seconds: float = 0.01) -> int:
    """
    Number of samples per envelope hop.

    Args:
        sample_rate: Sample rate in Hz.
        hop_seconds: Hop duration in seconds.

    Returns:
        Hop length in samples (at least 1).
    """
    return max(1, int(round_half_up(sample_rate * hop_seconds)))


def compute_envelope(
    buffer: SampleBuffer,
    config: Optional[AnalysisConfig] = None,
) -> EnergyEnvelope:
    """
    Compute the normalized energy envelope of a buffer.

    The trailing partial hop is discarded. An empty or too-short buffer gives
    an empty envelope; a silent one gives all zeros.

    Args:
        buffer: Input recording.
        config: Analysis parameters (hop duration).

    Returns:
        EnergyEnvelope aligned to the hop grid.
    """
    cfg = config or DEFAULT_CONFIG
    sr = buffer.sample_rate
    hop_length = compute_hop_length(sr, cfg.hop_seconds)

    if buffer.n_samples < hop_length:
        logger.debug("envelope: %d samples < one hop (%d)", buffer.n_samples, hop_length)
        return EnergyEnvelope(
            values=np.zeros(0, dtype=np.float64),
            hop_length=hop_length,
            sample_rate=sr,
        )

    # (hop_length, n_hops) view over complete hops only
    frames = librosa.util.frame(buffer.samples, frame_length=hop_length, hop_length=hop_length)
    rms = np.sqrt(np.mean(frames ** 2, axis=0))

    peak = max(float(rms.max()), PEAK_FLOOR)
    values = rms / peak

    logger.debug("envelope: %d hops of %d samples, peak=%.5f", len(values), hop_length, peak)
    return EnergyEnvelope(values=values, hop_length=hop_length, sample_rate=sr)
