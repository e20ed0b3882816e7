"""
Command-line analysis of a recording on disk.

Prints the one-line summary (or the JSON document) for an audio file and
optionally writes the JSON document and the intermediate arrays to disk.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from humprint.analyzer import FeatureAnalyzer
from humprint.config import AnalysisConfig
from humprint.core.buffer import SampleBuffer
from humprint.io.exporter import RecordExporter
from humprint.logger import LOG_LEVELS, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="humprint",
        description="Extract tempo, key, energy, rhythm and contour from a short recording",
    )

    parser.add_argument(
        "audio",
        type=Path,
        help="Input audio file (wav, flac, ogg, mp3)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the JSON document instead of the summary line",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Also write the JSON document to this file",
    )

    parser.add_argument(
        "--features",
        type=Path,
        default=None,
        help="Write intermediate arrays (envelope, onsets, segment pitches) to this .npz file",
    )

    parser.add_argument(
        "--min-onset-gap",
        type=float,
        default=AnalysisConfig.min_onset_gap_ms,
        help=f"Minimum spacing between onsets in ms (default: {AnalysisConfig.min_onset_gap_ms:g})",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        return 1

    try:
        config = AnalysisConfig(min_onset_gap_ms=args.min_onset_gap)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    analyzer = FeatureAnalyzer(config)
    exporter = RecordExporter()

    buffer = SampleBuffer.from_file(args.audio)
    features = analyzer.extract(buffer)
    result = analyzer.assemble(features)

    if args.json:
        print(exporter.to_json(result))
    else:
        print(result.summary)

    if args.output is not None:
        exporter.export_json(result, args.output)
    if args.features is not None:
        exporter.export_numpy(features, args.features)

    return 0


if __name__ == "__main__":
    sys.exit(main())
