"""
Voice signature construction, enrollment averaging and storage format.

A signature summarises one utterance as MFCC mean / variance / delta-mean
vectors plus signal energy, zero-crossing rate and analysed frame count.
"""

import json
import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .config import (
    LEGACY_DELTA,
    LEGACY_ENERGY,
    LEGACY_FRAME_COUNT,
    LEGACY_VARIANCE,
    LEGACY_ZERO_CROSSING_RATE,
    MIN_RELIABLE_SAMPLES,
)
from .errors import (
    DimensionMismatchError,
    EmptyAudioError,
    EmptyEnrollmentError,
    InsufficientAudioError,
)
from .filterbank import DEFAULT_BANK, SpectralBank
from .mfcc import extract_mfcc
from .types import VoiceSignature

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Frame statistics
# ---------------------------------------------------------------------------

def compute_voice_signature(frames) -> np.ndarray:
    """Element-wise mean of MFCC frames; empty vector for no frames."""
    frames = np.asarray(frames, dtype=np.float64)
    if frames.size == 0:
        return np.zeros(0)
    return frames.mean(axis=0)


def compute_variance(frames, mean) -> np.ndarray:
    """Population variance (divide by N) of each coefficient."""
    frames = np.asarray(frames, dtype=np.float64)
    if frames.size == 0:
        return np.zeros(0)
    diff = frames - np.asarray(mean, dtype=np.float64)
    return (diff * diff).mean(axis=0)


def compute_delta(frames) -> np.ndarray:
    """Velocity coefficients (f[i+1] - f[i-1]) / 2 for interior frames.

    With fewer than three frames there is no velocity to measure and the
    input is returned unchanged.
    """
    frames = np.asarray(frames, dtype=np.float64)
    if frames.shape[0] < 3:
        return frames
    return (frames[2:] - frames[:-2]) / 2.0


def compute_energy(audio) -> float:
    audio = np.asarray(audio, dtype=np.float64)
    if audio.size == 0:
        return 0.0
    return float(np.mean(audio * audio))


def compute_zero_crossing_rate(audio) -> float:
    """Sign changes between adjacent samples, normalised by sample count.

    Zero counts as positive.
    """
    audio = np.asarray(audio, dtype=np.float64)
    if audio.size == 0:
        return 0.0
    positive = audio >= 0
    crossings = np.count_nonzero(positive[1:] != positive[:-1])
    return crossings / len(audio)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def extract_voice_signature(audio, bank: SpectralBank = DEFAULT_BANK) -> VoiceSignature:
    """Extract a VoiceSignature from a mono audio buffer.

    Raises:
        EmptyAudioError: the buffer has no samples.
        InsufficientAudioError: the buffer is shorter than one analysis frame.
    """
    audio = np.asarray(audio, dtype=np.float64).ravel()
    if audio.size == 0:
        raise EmptyAudioError("Audio buffer is empty")

    if audio.size < MIN_RELIABLE_SAMPLES:
        logger.warning(
            f"Audio too short for reliable signature extraction "
            f"({audio.size} samples, {audio.size / bank.config.sample_rate:.2f}s)"
        )

    mfcc_frames = extract_mfcc(audio, bank)
    if mfcc_frames.shape[0] == 0:
        raise InsufficientAudioError(
            f"Audio shorter than one {bank.config.fft_size}-sample analysis frame"
        )

    mean = compute_voice_signature(mfcc_frames)
    variance = compute_variance(mfcc_frames, mean)
    delta_mean = compute_voice_signature(compute_delta(mfcc_frames))

    signature = VoiceSignature(
        mean=mean.tolist(),
        variance=variance.tolist(),
        delta_mean=delta_mean.tolist(),
        energy=compute_energy(audio),
        zero_crossing_rate=compute_zero_crossing_rate(audio),
        frame_count=float(mfcc_frames.shape[0]),
    )
    if signature.is_degraded:
        logger.warning(f"Signature built from only {mfcc_frames.shape[0]} frames")
    return signature


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------

def average_signatures(signatures: Sequence[VoiceSignature]) -> VoiceSignature:
    """Merge same-speaker samples into one reference signature.

    Vector fields are averaged element-wise, the scalars (including
    frame_count) as plain means.

    Raises:
        EmptyEnrollmentError: ``signatures`` is empty.
        DimensionMismatchError: the samples do not share one dimension.
    """
    if len(signatures) == 0:
        raise EmptyEnrollmentError("No signatures to average")

    dim = signatures[0].dimension
    for i, sig in enumerate(signatures):
        if not sig.is_consistent or sig.dimension != dim:
            raise DimensionMismatchError(
                f"Signature {i} has dimension {sig.dimension}, expected {dim}"
            )

    means = np.array([s.mean for s in signatures], dtype=np.float64)
    variances = np.array([s.variance for s in signatures], dtype=np.float64)
    deltas = np.array([s.delta_mean for s in signatures], dtype=np.float64)

    return VoiceSignature(
        mean=means.mean(axis=0).tolist(),
        variance=variances.mean(axis=0).tolist(),
        delta_mean=deltas.mean(axis=0).tolist(),
        energy=float(np.mean([s.energy for s in signatures])),
        zero_crossing_rate=float(np.mean([s.zero_crossing_rate for s in signatures])),
        frame_count=float(np.mean([s.frame_count for s in signatures])),
    )


# ---------------------------------------------------------------------------
# Storage format
# ---------------------------------------------------------------------------

def convert_legacy_signature(legacy: Sequence[float]) -> VoiceSignature:
    """Wrap a bare MFCC mean vector (pre-variance storage format).

    The remaining fields get fixed placeholder values, not statistics of the
    original recording, so matches against converted signatures are less
    discriminative than against freshly enrolled ones.
    """
    n = len(legacy)
    return VoiceSignature(
        mean=[float(v) for v in legacy],
        variance=[LEGACY_VARIANCE] * n,
        delta_mean=[LEGACY_DELTA] * n,
        energy=LEGACY_ENERGY,
        zero_crossing_rate=LEGACY_ZERO_CROSSING_RATE,
        frame_count=LEGACY_FRAME_COUNT,
    )


def signature_to_dict(sig: VoiceSignature) -> dict:
    return {
        "mean": list(sig.mean),
        "variance": list(sig.variance),
        "deltaMean": list(sig.delta_mean),
        "energy": sig.energy,
        "zeroCrossingRate": sig.zero_crossing_rate,
        "frameCount": sig.frame_count,
    }


def serialize_signature(sig: VoiceSignature) -> str:
    """Serialize a signature to JSON for an external store."""
    return json.dumps(signature_to_dict(sig))


def _number(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("Non-finite value in signature")
    return number


def _vector(values) -> List[float]:
    if not isinstance(values, list):
        raise TypeError("Expected a list of numbers")
    return [_number(v) for v in values]


def signature_from_dict(data: dict) -> VoiceSignature:
    """Build a signature from its stored dict form.

    ``mean`` and ``variance`` are required; other fields fall back to the
    legacy defaults.
    """
    mean = _vector(data["mean"])
    variance = _vector(data["variance"])
    n = len(mean)
    delta = data.get("deltaMean")
    sig = VoiceSignature(
        mean=mean,
        variance=variance,
        delta_mean=_vector(delta) if delta is not None else [LEGACY_DELTA] * n,
        energy=_number(data.get("energy", LEGACY_ENERGY)),
        zero_crossing_rate=_number(data.get("zeroCrossingRate", LEGACY_ZERO_CROSSING_RATE)),
        frame_count=_number(data.get("frameCount", LEGACY_FRAME_COUNT)),
    )
    if not sig.is_consistent:
        raise DimensionMismatchError("Signature vectors have inconsistent lengths")
    return sig


def deserialize_signature(data: str) -> Optional[VoiceSignature]:
    """Parse a stored signature.

    Accepts the current JSON object format and the legacy bare array of MFCC
    means. Returns None for anything that is not a valid signature.
    """
    try:
        parsed = json.loads(data)
        if isinstance(parsed, dict) and parsed.get("mean") and parsed.get("variance"):
            return signature_from_dict(parsed)
        if isinstance(parsed, list) and parsed:
            return convert_legacy_signature(_vector(parsed))
    except (TypeError, ValueError, KeyError, OverflowError, RecursionError) as e:
        logger.warning(f"Discarding unreadable voice signature: {e}")
    return None
