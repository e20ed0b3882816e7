"""Musical feature extraction for short hummed or sung recordings."""

import logging

from humprint.analyzer import (
    AnalysisResult,
    ExtractedFeatures,
    FeatureAnalyzer,
    analyze,
    analyze_file,
    build_analysis_text,
)
from humprint.config import AnalysisConfig
from humprint.core.buffer import SampleBuffer
from humprint.io.exporter import RecordExporter
from humprint.retry import RetryPolicy, with_retry

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ExtractedFeatures",
    "FeatureAnalyzer",
    "RecordExporter",
    "RetryPolicy",
    "SampleBuffer",
    "analyze",
    "analyze_file",
    "build_analysis_text",
    "with_retry",
]
