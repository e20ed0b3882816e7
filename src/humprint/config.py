"""
Analysis configuration.

Every tunable constant of the extractor lives on one immutable object that
is handed to the analyzer (and to each component) at construction time.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters for the feature extraction pipeline.

    Change the defaults only for experiments: downstream prompts depend on
    the exact thresholds.

    Attributes:
        hop_seconds: Energy envelope hop length (10 ms).
        onset_window: Trailing moving-average window, in envelope hops.
        onset_ratio: Multiplier applied to the trailing average.
        onset_offset: Constant added to the onset threshold.
        min_onset_gap_ms: Minimum spacing between accepted onsets.
        default_bpm: Tempo reported when fewer than two onsets are found.
        min_bpm: Lower edge of the plausible tempo range.
        max_bpm: Upper edge of the plausible tempo range.
        pitch_window_seconds: Length of the centred pitch analysis segment.
        pitch_fmin: Lowest detectable pitch in Hz.
        pitch_fmax: Highest detectable pitch in Hz.
        max_compare: Maximum samples compared per autocorrelation lag.
        pitch_peak_tolerance: The earliest local correlation peak within this
            distance of the best score wins, which keeps sub-harmonic lags
            (whole multiples of the period) from being chosen. 0 selects the
            plain maximum.
        reference_low: Bottom of the reference octave (C4).
        reference_high: Top of the reference octave (exclusive).
        energy_scale: Multiplier mapping raw RMS to the [0, 1] energy scale.
        low_energy_below: Energy under this is "low".
        moderate_energy_below: Energy under this (and not low) is "moderate".
        major_above: Energy strictly above this gives a major key quality.
        swing_ratio_low: Exclusive lower bound of a swung interval ratio.
        swing_ratio_high: Exclusive upper bound of a swung interval ratio.
        swing_threshold: Swing score above which rhythm is "swing".
        syncopation_cv: Coefficient of variation above which rhythm is
            "syncopated".
        contour_segments: Number of equal segments for contour tracking.
        contour_slope: Normalized slope magnitude that counts as a trend.

    Example:
        >>> config = AnalysisConfig(min_onset_gap_ms=80.0)
        >>> result = FeatureAnalyzer(config).analyze(buffer)
    """

    # Envelope / onsets
    hop_seconds: float = 0.01
    onset_window: int = 8
    onset_ratio: float = 1.5
    onset_offset: float = 0.05
    min_onset_gap_ms: float = 100.0

    # Tempo
    default_bpm: int = 120
    min_bpm: float = 60.0
    max_bpm: float = 200.0

    # Pitch
    pitch_window_seconds: float = 2.0
    pitch_fmin: float = 60.0
    pitch_fmax: float = 1000.0
    max_compare: int = 4096
    pitch_peak_tolerance: float = 0.01
    reference_low: float = 261.63
    reference_high: float = 523.25

    # Energy
    energy_scale: float = 3.0
    low_energy_below: float = 0.3
    moderate_energy_below: float = 0.6
    major_above: float = 0.4

    # Rhythm
    swing_ratio_low: float = 1.3
    swing_ratio_high: float = 2.2
    swing_threshold: float = 0.5
    syncopation_cv: float = 0.35

    # Contour
    contour_segments: int = 6
    contour_slope: float = 0.02

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.hop_seconds <= 0:
            raise ValueError(f"hop_seconds must be positive, got {self.hop_seconds}")
        if self.onset_window < 1:
            raise ValueError(f"onset_window must be at least 1, got {self.onset_window}")
        if self.min_onset_gap_ms < 0:
            raise ValueError(
                f"min_onset_gap_ms must be non-negative, got {self.min_onset_gap_ms}"
            )
        if not 0 < self.min_bpm < self.max_bpm:
            raise ValueError(
                f"expected 0 < min_bpm < max_bpm, got {self.min_bpm}..{self.max_bpm}"
            )
        # Octave folding only terminates when the range spans a full octave.
        if self.max_bpm < 2 * self.min_bpm:
            raise ValueError(
                f"max_bpm ({self.max_bpm}) must be at least twice min_bpm ({self.min_bpm})"
            )
        if not 0 < self.pitch_fmin < self.pitch_fmax:
            raise ValueError(
                f"expected 0 < pitch_fmin < pitch_fmax, got "
                f"{self.pitch_fmin}..{self.pitch_fmax}"
            )
        if self.pitch_window_seconds <= 0:
            raise ValueError(
                f"pitch_window_seconds must be positive, got {self.pitch_window_seconds}"
            )
        if self.max_compare < 1:
            raise ValueError(f"max_compare must be at least 1, got {self.max_compare}")
        if self.pitch_peak_tolerance < 0:
            raise ValueError(
                f"pitch_peak_tolerance must be non-negative, got {self.pitch_peak_tolerance}"
            )
        if not 0 < self.reference_low < self.reference_high:
            raise ValueError(
                f"expected 0 < reference_low < reference_high, got "
                f"{self.reference_low}..{self.reference_high}"
            )
        if self.low_energy_below > self.moderate_energy_below:
            raise ValueError(
                f"low_energy_below ({self.low_energy_below}) must not exceed "
                f"moderate_energy_below ({self.moderate_energy_below})"
            )
        if self.contour_segments < 2:
            raise ValueError(
                f"contour_segments must be at least 2, got {self.contour_segments}"
            )


DEFAULT_CONFIG = AnalysisConfig()
"""Reference configuration used when a component is built without one."""
