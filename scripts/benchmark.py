"""
Humprint analysis benchmark.

Usage:
    python scripts/benchmark.py [--quick]

Modes:
    default:   8 s clip at 44 100 Hz, 3 warm-up + 10 timed runs per stage
    --quick:   2 s clip at 22 050 Hz, 1 warm-up + 3 timed runs (CI-friendly)

Output: per-stage timing table plus the summary line of the synthetic clip.
A full analysis of an 8 s clip is expected to finish well under a second.
"""

import argparse
import os
import sys
import time
from typing import List

import numpy as np

# Make sure the installed package is on the path when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from humprint.analyzer import FeatureAnalyzer
from humprint.core.buffer import SampleBuffer
from humprint.core.envelope import compute_envelope

_SEP = "─" * 72


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _timeit(fn, *args, warmup: int = 2, runs: int = 5, **kwargs) -> List[float]:
    """Run fn(*args, **kwargs), discard warmup iterations, return timed samples."""
    for _ in range(warmup):
        fn(*args, **kwargs)
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn(*args, **kwargs)
        times.append(time.perf_counter() - t0)
    return times


def _row(label: str, times: List[float]) -> None:
    ms = np.array(times) * 1000.0
    print(f"  {label:<24} mean {ms.mean():8.2f} ms   min {ms.min():8.2f} ms   max {ms.max():8.2f} ms")


def synthetic_hum(duration: float, sr: int) -> SampleBuffer:
    """A gliding hummed line with a 100 BPM pulse."""
    t = np.arange(int(duration * sr)) / sr
    freq = np.linspace(220.0, 330.0, len(t))
    phase = 2 * np.pi * np.cumsum(freq) / sr
    pulse = 0.4 + 0.6 * (np.mod(t, 0.6) < 0.15)
    return SampleBuffer(samples=0.3 * pulse * np.sin(phase), sample_rate=sr)


def main() -> None:
    parser = argparse.ArgumentParser(description="Time the analysis pipeline")
    parser.add_argument("--quick", action="store_true", help="Short clip, few runs")
    args = parser.parse_args()

    if args.quick:
        duration, sr, warmup, runs = 2.0, 22050, 1, 3
    else:
        duration, sr, warmup, runs = 8.0, 44100, 3, 10

    buffer = synthetic_hum(duration, sr)
    analyzer = FeatureAnalyzer()

    _hdr(f"{duration:g} s clip @ {sr} Hz, {runs} runs")
    envelope = compute_envelope(buffer)
    onsets = analyzer.onset_detector.detect(envelope)

    _row("envelope", _timeit(compute_envelope, buffer, warmup=warmup, runs=runs))
    _row("onsets", _timeit(analyzer.onset_detector.detect, envelope, warmup=warmup, runs=runs))
    _row("tempo", _timeit(analyzer.tempo_estimator.estimate, onsets, warmup=warmup, runs=runs))
    _row("pitch", _timeit(analyzer.pitch_detector.detect, buffer, warmup=warmup, runs=runs))
    _row("energy", _timeit(analyzer.energy_classifier.classify, buffer, warmup=warmup, runs=runs))
    _row("rhythm", _timeit(analyzer.rhythm_classifier.classify, onsets, warmup=warmup, runs=runs))
    _row("contour", _timeit(analyzer.contour_detector.detect, buffer, warmup=warmup, runs=runs))
    total = _timeit(analyzer.analyze, buffer, warmup=warmup, runs=runs)
    _row("analyze (total)", total)

    _hdr("Result")
    print(f"  {analyzer.analyze(buffer).summary}")
    if max(total) >= 1.0:
        print("  WARNING: analysis took longer than one second")


if __name__ == "__main__":
    main()
