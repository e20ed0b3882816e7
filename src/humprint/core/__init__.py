"""Core signal analysis modules."""

from humprint.core.buffer import SampleBuffer
from humprint.core.contour import ContourDetector
from humprint.core.energy import EnergyClassifier
from humprint.core.envelope import EnergyEnvelope, compute_envelope
from humprint.core.onsets import OnsetDetector
from humprint.core.pitch import PitchDetector
from humprint.core.rhythm import RhythmClassifier
from humprint.core.tempo import TempoEstimator

__all__ = [
    "SampleBuffer",
    "ContourDetector",
    "EnergyClassifier",
    "EnergyEnvelope",
    "compute_envelope",
    "OnsetDetector",
    "PitchDetector",
    "RhythmClassifier",
    "TempoEstimator",
]
