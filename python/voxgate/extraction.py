"""
Interchangeable voice-feature extraction strategies.

``statistical``  MFCC statistics signature built by this package.
``embedding``    fixed-length vector from an injected external model.

Both are driven through the SignatureExtractor interface, so enrollment
and verification code does not depend on which one is configured.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

import numpy as np

from .config import (
    DEFAULT_EMBEDDING_THRESHOLD,
    DEFAULT_VERIFY_THRESHOLD,
    MIN_RELIABLE_SAMPLES,
)
from .errors import ConfigurationError, DimensionMismatchError, EmptyAudioError, EmptyEnrollmentError
from .filterbank import DEFAULT_BANK, SpectralBank
from .signature import (
    average_signatures,
    deserialize_signature,
    extract_voice_signature,
    serialize_signature,
)
from .types import EmbeddingVerification, SpeakerEmbedding
from .verify import VoiceVerifier, cosine_similarity

logger = logging.getLogger(__name__)

EmbeddingProvider = Callable[[np.ndarray], Sequence[float]]


class SignatureExtractor(ABC):
    """Abstract interface for voiceprint extraction and verification."""

    name = ""

    @abstractmethod
    def extract(self, audio):
        """Extract a voiceprint from a mono 16 kHz audio buffer."""

    @abstractmethod
    def average(self, samples: Sequence):
        """Merge same-speaker voiceprints into one reference."""

    @abstractmethod
    def verify(self, test, stored, threshold: Optional[float] = None):
        """Score a test voiceprint against a reference.

        The returned object exposes at least ``match`` and ``confidence``.
        """

    @abstractmethod
    def serialize(self, item) -> str:
        """Textual storage form of a voiceprint."""

    @abstractmethod
    def deserialize(self, data: str):
        """Inverse of :meth:`serialize`; None for unreadable input."""


class StatisticalExtractor(SignatureExtractor):
    """MFCC mean / variance / delta signature with strict verification."""

    name = "statistical"

    def __init__(self, bank: SpectralBank = DEFAULT_BANK,
                 verifier: Optional[VoiceVerifier] = None,
                 threshold: float = DEFAULT_VERIFY_THRESHOLD):
        self.bank = bank
        self.verifier = verifier or VoiceVerifier()
        self.threshold = threshold

    def extract(self, audio):
        return extract_voice_signature(audio, self.bank)

    def average(self, samples):
        return average_signatures(samples)

    def verify(self, test, stored, threshold=None):
        return self.verifier.verify(test, stored, self.threshold if threshold is None else threshold)

    def serialize(self, item):
        return serialize_signature(item)

    def deserialize(self, data):
        return deserialize_signature(data)


def _unit(vector: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vector)
    return vector / norm if norm > 0 else vector


class EmbeddingExtractor(SignatureExtractor):
    """Speaker embedding from an external model.

    The provider is any callable mapping a float audio array to a
    fixed-length vector; model loading and inference stay with the caller.
    Similarities of neural embeddings cluster in 0.5-1.0 for one speaker,
    so confidence is reported as ``(similarity - 0.5) * 2`` clamped to [0, 1].
    """

    name = "embedding"

    def __init__(self, provider: EmbeddingProvider, model_id: str = "external",
                 threshold: float = DEFAULT_EMBEDDING_THRESHOLD):
        if provider is None:
            raise ConfigurationError("Embedding strategy requires an embedding provider")
        self.provider = provider
        self.model_id = model_id
        self.threshold = threshold

    def extract(self, audio) -> SpeakerEmbedding:
        samples = np.asarray(audio, dtype=np.float64).ravel()
        if samples.size == 0:
            raise EmptyAudioError("Audio buffer is empty")
        if samples.size < MIN_RELIABLE_SAMPLES:
            logger.warning("Audio too short for reliable embedding extraction")

        peak = np.max(np.abs(samples))
        if peak > 0:
            samples = samples / peak * 0.95

        vector = [float(v) for v in self.provider(samples)]
        return SpeakerEmbedding(embedding=vector, model_id=self.model_id, timestamp=time.time())

    def average(self, samples: Sequence[SpeakerEmbedding]) -> SpeakerEmbedding:
        if len(samples) == 0:
            raise EmptyEnrollmentError("No embeddings to average")
        dims = {len(s.embedding) for s in samples}
        if len(dims) != 1:
            raise DimensionMismatchError(f"Embeddings have differing dimensions: {sorted(dims)}")
        mean = np.mean([s.embedding for s in samples], axis=0)
        return SpeakerEmbedding(
            embedding=_unit(mean).tolist(),
            model_id=self.model_id,
            timestamp=time.time(),
        )

    def verify(self, test: SpeakerEmbedding, stored: SpeakerEmbedding,
               threshold: Optional[float] = None) -> EmbeddingVerification:
        threshold = self.threshold if threshold is None else threshold
        similarity = cosine_similarity(test.embedding, stored.embedding)
        confidence = min(max((similarity - 0.5) * 2, 0.0), 1.0)
        return EmbeddingVerification(
            match=similarity >= threshold,
            confidence=confidence,
            similarity=similarity,
            threshold=threshold,
        )

    def serialize(self, item: SpeakerEmbedding) -> str:
        return json.dumps({
            "embedding": list(item.embedding),
            "modelId": item.model_id,
            "timestamp": item.timestamp,
        })

    def deserialize(self, data: str) -> Optional[SpeakerEmbedding]:
        try:
            parsed = json.loads(data)
            vector: List[float] = parsed["embedding"]
            if not isinstance(vector, list) or not vector:
                return None
            return SpeakerEmbedding(
                embedding=[float(v) for v in vector],
                model_id=str(parsed.get("modelId", self.model_id)),
                timestamp=float(parsed.get("timestamp", 0.0)),
            )
        except (TypeError, ValueError, KeyError, AttributeError, OverflowError, RecursionError) as e:
            logger.warning(f"Discarding unreadable speaker embedding: {e}")
            return None


def create_extractor(strategy: str = "statistical",
                     provider: Optional[EmbeddingProvider] = None,
                     **kwargs) -> SignatureExtractor:
    """Build the extractor named by ``strategy``.

    Args:
        strategy: ``"statistical"`` or ``"embedding"``.
        provider: Embedding callable, required for ``"embedding"``.
        **kwargs: Passed to the extractor constructor.
    """
    if strategy == StatisticalExtractor.name:
        return StatisticalExtractor(**kwargs)
    if strategy == EmbeddingExtractor.name:
        return EmbeddingExtractor(provider, **kwargs)
    raise ConfigurationError(f"Unknown extraction strategy: {strategy!r}")
