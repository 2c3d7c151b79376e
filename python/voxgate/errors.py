"""Exceptions raised by Voxgate."""
from typing import Optional


class VoxgateError(ValueError):
    """Base class for all malformed-input errors raised by Voxgate."""


class EmptyAudioError(VoxgateError):
    """The audio buffer contains no samples."""


class InsufficientAudioError(VoxgateError):
    """The audio buffer is too short to yield a single analysis frame."""


class DimensionMismatchError(VoxgateError):
    """Two vectors that must be compared have different lengths."""


class EmptyEnrollmentError(VoxgateError):
    """No signatures were supplied for averaging."""


class EnrollmentError(VoxgateError):
    """Enrollment was attempted with the wrong number of samples."""


class SyntheticSpeechError(VoxgateError):
    """An enrollment sample was classified as synthetic speech."""

    def __init__(self, message: str, analysis=None, sample_index: Optional[int] = None):
        super().__init__(message)
        self.analysis = analysis
        self.sample_index = sample_index


class AudioDecodeError(VoxgateError):
    """Audio bytes could not be decoded."""


class ConfigurationError(VoxgateError):
    """An extractor or verifier was configured inconsistently."""
