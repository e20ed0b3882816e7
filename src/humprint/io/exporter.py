"""
Record serialization module.

Turns analysis results into the flat record stored alongside each generated
song, into JSON documents, and into the text that the document store embeds
for similarity search. Intermediate arrays can be dumped to ``.npz`` for
offline inspection.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import numpy as np

from humprint.analyzer import AnalysisResult, ExtractedFeatures, build_analysis_text

# Only the head of the lyrics goes into the embedding text.
LYRICS_EMBED_CHARS = 500


@dataclass
class RecordMetadata:
    """Header written next to the record in exported documents."""

    schema_version: str = "1.0"


class RecordExporter:
    """
    Exports analysis results for downstream consumers.

    The record keys (``tempo``, ``key``, ``note``, ``frequency``,
    ``energy``, ``energyLevel``, ``rhythm``, ``contour``) are a stable
    contract with the UI, the prompt builder, and the document store.
    """

    def __init__(self, precision: int = 2):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values in the
                intermediate-array exports.
        """
        self.precision = precision
        self.metadata = RecordMetadata()

    def build_record(self, result: AnalysisResult) -> dict[str, Any]:
        """Flat record for one result."""
        return result.to_record()

    def build_document(self, result: AnalysisResult) -> dict[str, Any]:
        """
        Record plus summary text and schema header.

        Returns:
            Dictionary with ``metadata``, ``analysisText`` and
            ``audioAnalysis`` keys.
        """
        return {
            "metadata": {"schema_version": self.metadata.schema_version},
            "analysisText": build_analysis_text(result),
            "audioAnalysis": self.build_record(result),
        }

    def from_record(self, record: Mapping[str, Any]) -> AnalysisResult:
        """Inverse of :meth:`build_record`."""
        return AnalysisResult.from_record(record)

    def to_json(self, result: AnalysisResult, indent: Optional[int] = 2) -> str:
        """Serialize the document for a result to a JSON string."""
        return json.dumps(self.build_document(result), indent=indent)

    def export_json(
        self,
        result: AnalysisResult,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export the document for a result to a JSON file.

        Args:
            result: Analysis result.
            output_path: Path for output JSON file.
            indent: JSON indentation level.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.build_document(result), f, indent=indent)

        return output_path

    def export_numpy(
        self,
        features: ExtractedFeatures,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export intermediate arrays as a compressed NumPy archive.

        Args:
            features: Output of :meth:`FeatureAnalyzer.extract`.
            output_path: Path for output .npz file.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        np.savez_compressed(
            output_path,
            envelope=features.envelope.values,
            hop_length=np.array([features.envelope.hop_length]),
            sample_rate=np.array([features.envelope.sample_rate]),
            onset_times_ms=np.round(features.onset_times_ms, self.precision),
            segment_pitches=np.round(features.segment_pitches, self.precision),
            tempo_bpm=np.array([features.tempo_bpm]),
            frequency_hz=np.array([features.pitch.frequency_hz]),
        )

        return output_path

    def embedding_text(
        self,
        record: Mapping[str, Any],
        genre: Optional[str] = None,
        theme: Optional[str] = None,
        lyrics: Optional[str] = None,
    ) -> str:
        """
        Text embedded by the document store for similarity search.

        Falsy analysis fields are left out, so a silent take with energy 0
        contributes no "Energy" part.

        Args:
            record: Flat analysis record (see :meth:`build_record`).
            genre: Selected genre, if any.
            theme: Song theme, if any.
            lyrics: Generated lyrics; only the first 500 characters are used.

        Returns:
            Parts joined by ``". "``.
        """
        parts = []
        if genre is not None:
            parts.append(f"Genre: {genre}")
        if theme is not None:
            parts.append(f"Theme: {theme}")

        if record:
            if record.get("tempo"):
                parts.append(f"Tempo: {record['tempo']} BPM")
            if record.get("energy"):
                parts.append(f"Energy: {record['energy']}")
            if record.get("key"):
                parts.append(f"Key: {record['key']}")

        if lyrics:
            parts.append(f"Lyrics: {lyrics[:LYRICS_EMBED_CHARS]}")

        return ". ".join(parts)
