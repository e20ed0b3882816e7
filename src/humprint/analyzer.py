"""
Analysis aggregator.

Runs every extractor over one buffer and assembles the final
:class:`AnalysisResult` plus its one-line summary. Each component falls back
to its own default on degenerate input, so a valid buffer always yields a
complete result.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import numpy as np

from humprint.config import AnalysisConfig, DEFAULT_CONFIG
from humprint.core.buffer import SampleBuffer
from humprint.core.contour import ContourDetector
from humprint.core.energy import EnergyClassifier, EnergyReading
from humprint.core.envelope import EnergyEnvelope, compute_envelope
from humprint.core.onsets import OnsetDetector
from humprint.core.pitch import PitchDetector, PitchEstimate
from humprint.core.rhythm import RhythmClassifier
from humprint.core.tempo import TempoEstimator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Musical features of one recording."""

    tempo_bpm: int
    key: str            # "<note> <major|minor>"
    note: str
    frequency_hz: float
    energy: float       # [0, 1]
    energy_level: str   # "low" | "moderate" | "high"
    rhythm: str         # "straight" | "swing" | "syncopated"
    contour: str        # "ascending" | "descending" | "oscillating"

    @property
    def summary(self) -> str:
        """Human-readable one-line description."""
        return build_analysis_text(self)

    def to_record(self) -> dict[str, Any]:
        """Flat record in the field layout consumed downstream."""
        return {
            "tempo": self.tempo_bpm,
            "key": self.key,
            "note": self.note,
            "frequency": self.frequency_hz,
            "energy": self.energy,
            "energyLevel": self.energy_level,
            "rhythm": self.rhythm,
            "contour": self.contour,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AnalysisResult":
        """
        Rebuild a result from a flat record.

        Raises:
            KeyError: If a field is missing.
        """
        return cls(
            tempo_bpm=int(record["tempo"]),
            key=str(record["key"]),
            note=str(record["note"]),
            frequency_hz=float(record["frequency"]),
            energy=float(record["energy"]),
            energy_level=str(record["energyLevel"]),
            rhythm=str(record["rhythm"]),
            contour=str(record["contour"]),
        )


@dataclass
class ExtractedFeatures:
    """Intermediate products of one analysis run."""

    envelope: EnergyEnvelope
    onset_times_ms: np.ndarray
    tempo_bpm: int
    pitch: PitchEstimate
    energy: EnergyReading
    rhythm: str
    segment_pitches: np.ndarray
    contour: str

    @property
    def key(self) -> str:
        return f"{self.pitch.note_name} {self.energy.key_quality}"


def build_analysis_text(result: AnalysisResult) -> str:
    """
    Format a result as the one-line summary used in prompts and the UI.

    Example:
        ``"100 BPM, C major, high energy, swing rhythm, ascending melody"``
    """
    return (
        f"{result.tempo_bpm} BPM, {result.key}, {result.energy_level} energy, "
        f"{result.rhythm} rhythm, {result.contour} melody"
    )


class FeatureAnalyzer:
    """
    Extracts tempo, pitch, energy, rhythm, and contour from a recording.

    Holds no state besides its configuration; one instance can analyse any
    number of independent buffers, including from several threads.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the analyzer.

        Args:
            config: Analysis parameters shared by every component.
        """
        self.config = config or DEFAULT_CONFIG
        self.onset_detector = OnsetDetector(self.config)
        self.tempo_estimator = TempoEstimator(self.config)
        self.pitch_detector = PitchDetector(self.config)
        self.energy_classifier = EnergyClassifier(self.config)
        self.rhythm_classifier = RhythmClassifier(self.config)
        self.contour_detector = ContourDetector(self.config)

    def extract(self, buffer: SampleBuffer) -> ExtractedFeatures:
        """
        Run every extractor and keep the intermediate results.

        Args:
            buffer: Input recording.

        Returns:
            ExtractedFeatures for inspection or export.
        """
        envelope = compute_envelope(buffer, self.config)
        onsets = self.onset_detector.detect(envelope)
        tempo = self.tempo_estimator.estimate(onsets)
        pitch = self.pitch_detector.detect(buffer)
        energy = self.energy_classifier.classify(buffer)
        rhythm = self.rhythm_classifier.classify(onsets)
        segment_pitches = self.contour_detector.segment_pitches(buffer)
        contour = self.contour_detector.classify(segment_pitches)

        return ExtractedFeatures(
            envelope=envelope,
            onset_times_ms=onsets,
            tempo_bpm=tempo,
            pitch=pitch,
            energy=energy,
            rhythm=rhythm,
            segment_pitches=segment_pitches,
            contour=contour,
        )

    @staticmethod
    def assemble(features: ExtractedFeatures) -> AnalysisResult:
        """Build the final record from extracted features."""
        return AnalysisResult(
            tempo_bpm=features.tempo_bpm,
            key=features.key,
            note=features.pitch.note_name,
            frequency_hz=features.pitch.frequency_hz,
            energy=features.energy.energy,
            energy_level=features.energy.level,
            rhythm=features.rhythm,
            contour=features.contour,
        )

    def analyze(self, buffer: SampleBuffer) -> AnalysisResult:
        """
        Analyse a completed recording.

        Args:
            buffer: Input recording.

        Returns:
            AnalysisResult for the buffer.
        """
        result = self.assemble(self.extract(buffer))
        logger.info("analysed %.2fs @ %d Hz: %s", buffer.duration, buffer.sample_rate,
                    result.summary)
        return result


def analyze(
    buffer: SampleBuffer,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Analyse one buffer with a fresh :class:`FeatureAnalyzer`."""
    return FeatureAnalyzer(config).analyze(buffer)


def analyze_file(
    audio_path: Union[str, Path],
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Load the first channel of an audio file and analyse it."""
    return analyze(SampleBuffer.from_file(audio_path), config)
