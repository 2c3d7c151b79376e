"""Type definitions for Voxgate."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from .config import MIN_RELIABLE_FRAMES


@dataclass
class VoiceSignature:
    """Fixed-size statistical descriptor of one utterance.

    ``mean``, ``variance`` and ``delta_mean`` always share one length
    (13 MFCC coefficients for signatures built by this package).
    """
    mean: List[float]
    variance: List[float]
    delta_mean: List[float]
    energy: float
    zero_crossing_rate: float
    frame_count: float

    @property
    def dimension(self) -> int:
        return len(self.mean)

    @property
    def is_consistent(self) -> bool:
        """True when all vector fields share one length and frame_count >= 0."""
        n = len(self.mean)
        return (
            len(self.variance) == n
            and len(self.delta_mean) == n
            and self.frame_count >= 0
        )

    @property
    def is_degraded(self) -> bool:
        """True when too few frames were analysed for a reliable match."""
        return self.frame_count < MIN_RELIABLE_FRAMES


@dataclass
class DeepfakeMetrics:
    """Raw measurements behind a liveness verdict."""
    spectral_flatness: float
    temporal_variation: float
    pitch_variation: float
    breath_detected: bool
    micro_variations: float


@dataclass
class DeepfakeAnalysis:
    """Human / synthetic verdict for one audio buffer."""
    is_human: bool
    confidence: float
    metrics: DeepfakeMetrics
    reasons: List[str] = field(default_factory=list)


@dataclass
class VerificationDetails:
    """Per-component scores of a strict verification."""
    mean_similarity: float
    variance_similarity: float
    overall_score: float
    mean_passed: bool
    variance_passed: bool


@dataclass
class VerificationResult:
    """Outcome of comparing a test signature with a reference."""
    match: bool
    confidence: float
    details: VerificationDetails
    degraded: bool = False


@dataclass
class EnrollmentResult:
    """Reference signature produced from several same-speaker samples."""
    signature: VoiceSignature
    samples_used: int
    analyses: List[DeepfakeAnalysis] = field(default_factory=list)


@dataclass
class AuthenticationResult:
    """Liveness-gated verification outcome.

    ``verification`` is None when the attempt was rejected before scoring,
    either because the audio was classified as synthetic or because the
    stored reference could not be read.
    """
    match: bool
    confidence: float
    deepfake_analysis: Optional[DeepfakeAnalysis] = None
    verification: Optional[VerificationResult] = None
    reason: str = ""


@dataclass
class SpeakerEmbedding:
    """Fixed-length vector produced by an external embedding provider."""
    embedding: List[float]
    model_id: str
    timestamp: float


@dataclass
class EmbeddingVerification:
    """Outcome of comparing two speaker embeddings."""
    match: bool
    confidence: float
    similarity: float
    threshold: float
