"""Loudness classification and the key-quality heuristic."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.buffer import SampleBuffer
from humprint.core.rounding import round_half_up

logger = logging.getLogger(__name__)

ENERGY_LEVELS = ("low", "moderate", "high")
KEY_QUALITIES = ("minor", "major")


@dataclass(frozen=True)
class EnergyReading:
    """Overall loudness of a recording."""

    energy: float  # [0, 1], two decimals
    level: str     # "low" | "moderate" | "high"
    key_quality: str  # "major" | "minor"


class EnergyClassifier:
    """
    Whole-buffer RMS loudness, scaled to [0, 1] and bucketed.

    The same energy value decides the key quality: a loud take reads as
    major, a quiet one as minor. This stands in for chord detection, which a
    single melodic line cannot support, and is kept as is.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.cfg = config or DEFAULT_CONFIG

    @staticmethod
    def rms(samples: np.ndarray) -> float:
        """Root-mean-square of the whole array (0 when empty)."""
        if len(samples) == 0:
            return 0.0
        return float(np.sqrt(np.mean(np.square(samples))))

    def level_for(self, energy: float) -> str:
        if energy < self.cfg.low_energy_below:
            return "low"
        if energy < self.cfg.moderate_energy_below:
            return "moderate"
        return "high"

    def quality_for(self, energy: float) -> str:
        return "major" if energy > self.cfg.major_above else "minor"

    def classify(self, buffer: SampleBuffer) -> EnergyReading:
        """
        Classify the loudness of a buffer.

        Args:
            buffer: Input recording.

        Returns:
            EnergyReading with scaled energy, level, and key quality.
        """
        rms = self.rms(buffer.samples)
        energy = round_half_up(min(rms * self.cfg.energy_scale, 1.0), 2)
        logger.debug("energy: rms=%.4f energy=%.2f", rms, energy)
        return EnergyReading(
            energy=energy,
            level=self.level_for(energy),
            key_quality=self.quality_for(energy),
        )
