"""Export of analysis results."""

from humprint.io.exporter import RecordExporter

__all__ = ["RecordExporter"]
