"""
Sample buffer module.

Holds the immutable mono PCM input of one analysis run and loads it from
audio files. Only the first channel of a multi-channel source is examined.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import librosa
import numpy as np

logger = logging.getLogger(__name__)


def _first_channel(samples: np.ndarray) -> np.ndarray:
    """Reduce a (channels, n) or (n, channels) array to its first channel."""
    if samples.ndim == 1:
        return samples
    if samples.ndim != 2:
        raise ValueError(f"expected 1-D or 2-D samples, got shape {samples.shape}")
    # librosa returns (channels, n); most other decoders return (n, channels).
    if samples.shape[0] <= samples.shape[1]:
        return samples[0]
    return samples[:, 0]


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """
    Completed, decoded recording handed over by the capture layer.

    The samples are copied into a read-only float64 array on construction,
    so the caller's array is never touched and the buffer cannot be mutated
    while it is being analysed.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        if int(self.sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        data = _first_channel(np.asarray(self.samples, dtype=np.float64))
        data = np.array(data, dtype=np.float64, copy=True)
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @property
    def n_samples(self) -> int:
        """Total number of samples in the buffer."""
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length of the recording in seconds."""
        return self.n_samples / self.sample_rate

    @classmethod
    def from_file(
        cls,
        audio_path: Union[str, Path],
        sr: Optional[int] = None,
    ) -> "SampleBuffer":
        """
        Load a recording from disk.

        Args:
            audio_path: Path to audio file (wav, flac, ogg, mp3).
            sr: Target sample rate. None preserves the file's own rate.

        Returns:
            SampleBuffer holding the first channel of the file.
        """
        y, sr_out = librosa.load(audio_path, sr=sr, mono=False)
        logger.debug(
            "loaded %s: shape=%s sr=%d", audio_path, getattr(y, "shape", None), sr_out
        )
        return cls(samples=y, sample_rate=sr_out)
