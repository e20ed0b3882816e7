"""Tests for pitch detection, energy classification, and melodic contour."""

import numpy as np
import pytest

from humprint.config import AnalysisConfig
from humprint.core.buffer import SampleBuffer
from humprint.core.contour import CONTOURS, ContourDetector
from humprint.core.energy import EnergyClassifier
from humprint.core.pitch import (
    CHROMA_NAMES,
    PitchDetector,
    fold_to_octave,
    frequency_to_note,
)

from conftest import TEST_SR, sine, stepped_melody


# ---------------------------------------------------------------------------
# Pitch
# ---------------------------------------------------------------------------

class TestFrequencyToNote:
    @pytest.mark.parametrize(
        "freq, note",
        [
            (440.0, "A"),
            (880.0, "A"),
            (110.0, "A"),
            (277.18, "C#"),
            (329.63, "E"),
            (196.0, "G"),
            (1000.0, "B"),
        ],
    )
    def test_known_frequencies(self, freq, note):
        assert frequency_to_note(freq) == note

    def test_non_positive_maps_to_c(self):
        assert frequency_to_note(0.0) == "C"
        assert frequency_to_note(-12.0) == "C"

    def test_fold_to_octave(self):
        assert fold_to_octave(110.0) == 440.0
        assert fold_to_octave(1760.0) == 440.0
        assert 261.63 <= fold_to_octave(61.0) < 523.25


class TestPitchDetector:
    def test_a440_scenario(self, pure_sine):
        estimate = PitchDetector().detect(pure_sine)
        assert estimate.note_name == "A"
        assert estimate.frequency_hz == pytest.approx(440.0, rel=0.01)

    def test_octave_not_folded_in_reported_frequency(self):
        buffer = SampleBuffer(samples=sine(196.0, 2.0), sample_rate=TEST_SR)
        estimate = PitchDetector().detect(buffer)
        assert estimate.note_name == "G"
        assert estimate.frequency_hz == pytest.approx(196.0, rel=0.01)

    def test_e4(self):
        buffer = SampleBuffer(samples=sine(329.63, 1.5), sample_rate=TEST_SR)
        estimate = PitchDetector().detect(buffer)
        assert estimate.note_name == "E"
        assert estimate.frequency_hz == pytest.approx(329.6, rel=0.01)

    def test_other_sample_rate(self):
        buffer = SampleBuffer(samples=sine(440.0, 2.0, sr=22050), sample_rate=22050)
        estimate = PitchDetector().detect(buffer)
        assert estimate.note_name == "A"
        assert estimate.frequency_hz == pytest.approx(440.0, rel=0.01)

    def test_frequency_rounded_to_tenth(self, pure_sine):
        estimate = PitchDetector().detect(pure_sine)
        assert estimate.frequency_hz == round(estimate.frequency_hz, 1)

    def test_silence_still_reports_a_note(self, silence):
        estimate = PitchDetector().detect(silence)
        assert estimate.note_name in CHROMA_NAMES
        assert estimate.frequency_hz > 0

    def test_noise_reports_known_note(self, noise):
        estimate = PitchDetector().detect(noise)
        assert estimate.note_name in CHROMA_NAMES
        assert estimate.frequency_hz > 0

    def test_tiny_buffer_uses_minimum_lag(self):
        buffer = SampleBuffer(samples=np.array([0.1, -0.2, 0.3]), sample_rate=TEST_SR)
        estimate = PitchDetector().detect(buffer)
        assert estimate.frequency_hz == 1002.3

    def test_tenth_of_hertz_rounds_half_up(self):
        # A period of exactly 80 samples: 44100 / 80 = 551.25 Hz
        buffer = SampleBuffer(samples=sine(551.25, 1.0), sample_rate=TEST_SR)
        estimate = PitchDetector().detect(buffer)
        assert estimate.frequency_hz == 551.3
        assert estimate.note_name == "C#"

    def test_center_segment_is_two_seconds(self):
        buffer = SampleBuffer(samples=np.arange(5 * TEST_SR, dtype=float), sample_rate=TEST_SR)
        segment = PitchDetector().center_segment(buffer)
        assert len(segment) == 2 * TEST_SR
        assert segment[0] == (5 * TEST_SR - 2 * TEST_SR) // 2

    def test_lag_range(self):
        assert PitchDetector().lag_range(44100, 88200) == (44, 735)
        assert PitchDetector().lag_range(44100, 600) == (44, 300)

    def test_zero_tolerance_is_plain_argmax(self):
        scores = np.array([0.1, 0.95, 0.2, 0.99, 0.3])
        strict = PitchDetector(AnalysisConfig(pitch_peak_tolerance=0.0))
        assert strict.select_lag(scores) == 3
        assert PitchDetector(AnalysisConfig(pitch_peak_tolerance=0.05)).select_lag(scores) == 1

    def test_select_lag_first_of_equal_maxima(self):
        scores = np.array([0.0, 0.0, 0.0])
        assert PitchDetector().select_lag(scores) == 0


# ---------------------------------------------------------------------------
# Energy
# ---------------------------------------------------------------------------

class TestEnergyClassifier:
    def test_quiet_sine_scenario(self, quiet_sine):
        reading = EnergyClassifier().classify(quiet_sine)
        assert reading.energy == 0.42
        assert reading.level == "moderate"
        assert reading.key_quality == "major"

    def test_silence(self, silence):
        reading = EnergyClassifier().classify(silence)
        assert reading.energy == 0.0
        assert reading.level == "low"
        assert reading.key_quality == "minor"

    def test_loud_input_saturates(self, pure_sine):
        reading = EnergyClassifier().classify(pure_sine)
        assert reading.energy == 1.0
        assert reading.level == "high"

    def test_empty_buffer(self):
        buffer = SampleBuffer(samples=np.array([]), sample_rate=TEST_SR)
        reading = EnergyClassifier().classify(buffer)
        assert reading.energy == 0.0
        assert reading.level == "low"

    def test_energy_rounds_half_up(self):
        buffer = SampleBuffer(samples=np.full(1000, 0.125), sample_rate=TEST_SR)
        reading = EnergyClassifier(AnalysisConfig(energy_scale=1.0)).classify(buffer)
        assert reading.energy == 0.13

    def test_whole_buffer_rms(self):
        y = np.concatenate([np.full(100, 0.1), np.zeros(300)])
        assert EnergyClassifier.rms(y) == pytest.approx(0.05)

    def test_level_boundaries(self):
        classifier = EnergyClassifier()
        assert classifier.level_for(0.29) == "low"
        assert classifier.level_for(0.3) == "moderate"
        assert classifier.level_for(0.59) == "moderate"
        assert classifier.level_for(0.6) == "high"

    def test_quality_boundary(self):
        classifier = EnergyClassifier()
        assert classifier.quality_for(0.4) == "minor"
        assert classifier.quality_for(0.41) == "major"

    def test_energy_in_unit_range(self, noise):
        reading = EnergyClassifier().classify(noise)
        assert 0.0 <= reading.energy <= 1.0


# ---------------------------------------------------------------------------
# Contour
# ---------------------------------------------------------------------------

class TestContourDetector:
    def test_rising_melody(self):
        y = stepped_melody([200, 250, 300, 350, 400, 450])
        buffer = SampleBuffer(samples=y, sample_rate=TEST_SR)
        assert ContourDetector().detect(buffer) == "ascending"

    def test_falling_melody(self):
        y = stepped_melody([450, 400, 350, 300, 250, 200])
        buffer = SampleBuffer(samples=y, sample_rate=TEST_SR)
        assert ContourDetector().detect(buffer) == "descending"

    def test_zigzag_melody(self):
        y = stepped_melody([200, 400, 200, 400, 200, 400])
        buffer = SampleBuffer(samples=y, sample_rate=TEST_SR)
        assert ContourDetector().detect(buffer) == "oscillating"

    def test_flat_melody_is_oscillating(self):
        buffer = SampleBuffer(samples=sine(300.0, 3.0), sample_rate=TEST_SR)
        assert ContourDetector().detect(buffer) == "oscillating"

    def test_silence_is_oscillating(self, silence):
        detector = ContourDetector()
        np.testing.assert_array_equal(detector.segment_pitches(silence), np.zeros(6))
        assert detector.detect(silence) == "oscillating"

    def test_tiny_buffer(self):
        buffer = SampleBuffer(samples=np.array([0.1, -0.1, 0.1]), sample_rate=TEST_SR)
        assert ContourDetector().detect(buffer) == "oscillating"

    def test_segment_pitch_estimates(self):
        y = stepped_melody([200, 250, 300, 350, 400, 450])
        pitches = ContourDetector().segment_pitches(SampleBuffer(samples=y, sample_rate=TEST_SR))
        np.testing.assert_allclose(pitches, [200, 250, 300, 350, 400, 450], atol=3)

    def test_remainder_is_dropped(self):
        # 6 * 4 samples plus a noisy tail that must not be analysed
        y = np.array([1, -1, 1, -1] * 6 + [-1, 1, -1], dtype=float)
        pitches = ContourDetector().segment_pitches(SampleBuffer(samples=y, sample_rate=8))
        np.testing.assert_allclose(pitches, np.full(6, 3.0))

    def test_direction_changes(self):
        assert ContourDetector.direction_changes(np.array([1, 2, 1, 2, 1, 2.0])) == 4
        assert ContourDetector.direction_changes(np.array([1, 2, 3, 4, 5, 6.0])) == 0
        # flat steps do not count as a reversal
        assert ContourDetector.direction_changes(np.array([1, 2, 2, 1, 1, 1.0])) == 0

    def test_one_reversal_follows_trend(self):
        detector = ContourDetector()
        assert detector.classify(np.array([100, 200, 300, 400, 500, 450.0])) == "ascending"

    def test_normalized_slope(self):
        slope = ContourDetector.normalized_slope(np.array([100, 110, 120, 130, 140, 150.0]))
        assert slope == pytest.approx(10.0 / 125.0)
        assert ContourDetector.normalized_slope(np.zeros(6)) == 0.0

    def test_output_is_known_label(self, noise):
        assert ContourDetector().detect(noise) in CONTOURS
