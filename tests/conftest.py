"""Shared synthetic-signal fixtures."""

import numpy as np
import pytest

from humprint.core.buffer import SampleBuffer

TEST_SR = 44100
HOP = 441  # 10 ms at TEST_SR


def sine(freq: float, duration: float, sr: int = TEST_SR, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(duration * sr)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


def click_train(period_s: float, duration: float, sr: int = TEST_SR) -> np.ndarray:
    """One 10 ms, 1 kHz burst every ``period_s`` seconds, starting at t=0."""
    y = np.zeros(int(duration * sr))
    burst = np.sin(2 * np.pi * 1000.0 * np.arange(HOP) / sr)
    step = int(round(period_s * sr))
    for start in range(0, len(y) - HOP, step):
        y[start:start + HOP] = burst
    return y


def stepped_melody(freqs, segment_s: float = 0.5, sr: int = TEST_SR) -> np.ndarray:
    """Concatenated sine segments, one per frequency."""
    return np.concatenate([sine(f, segment_s, sr) for f in freqs])


@pytest.fixture
def pure_sine():
    """440 Hz, 2 s, RMS about 0.5."""
    return SampleBuffer(samples=sine(440.0, 2.0, amplitude=0.7), sample_rate=TEST_SR)


@pytest.fixture
def quiet_sine():
    """0.2 amplitude sine (RMS about 0.1414)."""
    return SampleBuffer(samples=sine(330.0, 2.0, amplitude=0.2), sample_rate=TEST_SR)


@pytest.fixture
def clicks_120():
    """Click train at exactly 120 onsets per minute, 4 s long."""
    return SampleBuffer(samples=click_train(0.5, 4.0), sample_rate=TEST_SR)


@pytest.fixture
def silence():
    return SampleBuffer(samples=np.zeros(2 * TEST_SR), sample_rate=TEST_SR)


@pytest.fixture
def noise():
    rng = np.random.default_rng(7)
    return SampleBuffer(samples=rng.uniform(-0.5, 0.5, 3 * TEST_SR), sample_rate=TEST_SR)
