"""Weighted multi-factor comparison of voice signatures."""
import logging
from typing import Dict, Optional

import numpy as np

from .config import DEFAULT_VERIFY_THRESHOLD
from .errors import DimensionMismatchError
from .types import VerificationDetails, VerificationResult, VoiceSignature

logger = logging.getLogger(__name__)


def cosine_similarity(a, b) -> float:
    """Cosine of the angle between two vectors.

    Returns 0 when either vector is empty or has zero norm, and when the
    lengths differ.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        logger.warning(f"Vector dimensions mismatch: {a.shape} vs {b.shape}")
        return 0.0
    if a.size == 0:
        return 0.0

    denominator = np.linalg.norm(a) * np.linalg.norm(b)
    if denominator == 0:
        return 0.0
    return float(np.dot(a, b) / denominator)


def _ratio(x: float, y: float) -> float:
    """min/max of two non-negative values; two zeros count as identical."""
    hi = max(x, y)
    if hi == 0:
        return 1.0
    return min(x, y) / hi


def _frame_ratio(test_frames: float, stored_frames: float) -> float:
    if stored_frames == 0:
        return 1.0 if test_frames == 0 else 0.0
    return 1.0 - min(abs(test_frames - stored_frames) / stored_frames, 1.0)


def _check_dimensions(test: VoiceSignature, stored: VoiceSignature) -> None:
    for name, sig in (('test', test), ('stored', stored)):
        if not sig.is_consistent:
            raise DimensionMismatchError(f"{name} signature has inconsistent vector lengths")
    if test.dimension != stored.dimension:
        raise DimensionMismatchError(
            f"Cannot compare signatures of dimension {test.dimension} and {stored.dimension}"
        )


class VoiceVerifier:
    """Strict signature verifier.

    The composite score blends six sub-scores; a match additionally needs
    the mean and variance similarities to clear their own gates, so a high
    composite cannot compensate for a failing component.
    """

    WEIGHTS = {
        'mean': 0.35,             # Average spectral envelope
        'variance': 0.25,         # Voice texture
        'delta': 0.15,            # Speaking dynamics
        'energy': 0.10,
        'zero_crossing': 0.05,
        'frame_count': 0.10,      # Phrase length
    }

    THRESHOLDS = {
        'mean_similarity': 0.88,
        'variance_similarity': 0.80,
    }

    def __init__(self, weights: Optional[Dict[str, float]] = None,
                 thresholds: Optional[Dict[str, float]] = None,
                 clamp_similarity: bool = False):
        """Initialize VoiceVerifier.

        Args:
            weights: Overrides merged over :attr:`WEIGHTS`.
            thresholds: Overrides merged over :attr:`THRESHOLDS`.
            clamp_similarity: Clamp cosine similarities to [0, 1] before
                weighting. Off by default, so a negative similarity lowers
                the composite score.
        """
        self.weights = {**self.WEIGHTS, **(weights or {})}
        self.thresholds = {**self.THRESHOLDS, **(thresholds or {})}
        self.clamp_similarity = clamp_similarity

    def _similarity(self, a, b) -> float:
        sim = cosine_similarity(a, b)
        if self.clamp_similarity:
            sim = min(max(sim, 0.0), 1.0)
        return sim

    def weighted_distance(self, test: VoiceSignature, stored: VoiceSignature) -> float:
        """Composite similarity score, 1.0 for identical signatures."""
        w = self.weights
        return (
            w['mean'] * self._similarity(test.mean, stored.mean)
            + w['variance'] * self._similarity(test.variance, stored.variance)
            + w['delta'] * self._similarity(test.delta_mean, stored.delta_mean)
            + w['energy'] * _ratio(test.energy, stored.energy)
            + w['zero_crossing'] * _ratio(test.zero_crossing_rate, stored.zero_crossing_rate)
            + w['frame_count'] * _frame_ratio(test.frame_count, stored.frame_count)
        )

    def verify(self, test: VoiceSignature, stored: VoiceSignature,
               threshold: float = DEFAULT_VERIFY_THRESHOLD) -> VerificationResult:
        """Compare a test signature against an enrolled reference.

        Raises:
            DimensionMismatchError: the signatures cannot be compared.
        """
        _check_dimensions(test, stored)

        overall = self.weighted_distance(test, stored)
        mean_sim = self._similarity(test.mean, stored.mean)
        variance_sim = self._similarity(test.variance, stored.variance)

        mean_passed = mean_sim >= self.thresholds['mean_similarity']
        variance_passed = variance_sim >= self.thresholds['variance_similarity']
        match = mean_passed and variance_passed and overall >= threshold

        degraded = test.is_degraded or stored.is_degraded
        if degraded:
            logger.warning("Verification used a signature with too few frames; result is unreliable")
        logger.debug(
            f"Verification: overall={overall:.4f} mean={mean_sim:.4f} "
            f"variance={variance_sim:.4f} match={match}"
        )

        return VerificationResult(
            match=match,
            confidence=overall,
            details=VerificationDetails(
                mean_similarity=mean_sim,
                variance_similarity=variance_sim,
                overall_score=overall,
                mean_passed=mean_passed,
                variance_passed=variance_passed,
            ),
            degraded=degraded,
        )


_default_verifier = VoiceVerifier()


def weighted_distance(test: VoiceSignature, stored: VoiceSignature) -> float:
    return _default_verifier.weighted_distance(test, stored)


def verify_voice_strict(test: VoiceSignature, stored: VoiceSignature,
                        threshold: float = DEFAULT_VERIFY_THRESHOLD) -> VerificationResult:
    """Strict verification with the default weights and gates."""
    return _default_verifier.verify(test, stored, threshold)
