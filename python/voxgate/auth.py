"""Liveness-gated voice enrollment and verification."""
import logging
from typing import List, Optional, Sequence

from .config import REQUIRED_ENROLLMENT_SAMPLES
from .deepfake import DeepfakeDetector
from .errors import EnrollmentError, SyntheticSpeechError
from .extraction import SignatureExtractor, StatisticalExtractor
from .types import AuthenticationResult, DeepfakeAnalysis, EnrollmentResult

logger = logging.getLogger(__name__)


class VoiceAuthenticator:
    """Main class for voice enrollment and verification.

    Every buffer is first checked by the liveness detector. Audio judged
    synthetic is never compared against a reference.
    """

    def __init__(
        self,
        extractor: Optional[SignatureExtractor] = None,
        detector: Optional[DeepfakeDetector] = None,
        threshold: Optional[float] = None,
        required_samples: int = REQUIRED_ENROLLMENT_SAMPLES,
    ):
        """Initialize VoiceAuthenticator.

        Args:
            extractor: Extraction strategy (statistical signature by default)
            detector: Liveness detector
            threshold: Verification threshold; None uses the extractor's own default
            required_samples: Number of recordings needed to enroll
        """
        self.extractor = extractor or StatisticalExtractor()
        self.detector = detector or DeepfakeDetector()
        self.threshold = threshold
        self.required_samples = required_samples

    def check_liveness(self, audio) -> DeepfakeAnalysis:
        return self.detector.detect(audio)

    def enroll(self, samples: Sequence) -> EnrollmentResult:
        """Build a reference voiceprint from several recordings.

        Args:
            samples: Audio buffers of the same speaker saying the same phrase

        Returns:
            EnrollmentResult with the averaged reference

        Raises:
            EnrollmentError: wrong number of samples
            SyntheticSpeechError: a sample failed the liveness check
        """
        if len(samples) != self.required_samples:
            raise EnrollmentError(
                f"Enrollment needs {self.required_samples} samples, got {len(samples)}"
            )

        analyses: List[DeepfakeAnalysis] = []
        voiceprints = []
        for i, audio in enumerate(samples):
            analysis = self.check_liveness(audio)
            analyses.append(analysis)
            if not analysis.is_human:
                raise SyntheticSpeechError(
                    f"Enrollment sample {i + 1} rejected: {'; '.join(analysis.reasons)}",
                    analysis=analysis,
                    sample_index=i,
                )
            voiceprints.append(self.extractor.extract(audio))
            logger.info(f"Enrollment sample {i + 1}/{self.required_samples} accepted")

        reference = self.extractor.average(voiceprints)
        return EnrollmentResult(signature=reference, samples_used=len(voiceprints), analyses=analyses)

    def verify(self, audio, stored) -> AuthenticationResult:
        """Verify a recording against an enrolled reference.

        Args:
            audio: Audio buffer of the claimed speaker
            stored: Reference voiceprint produced by :meth:`enroll`

        Returns:
            AuthenticationResult; a synthetic verdict is a non-match with
            zero confidence and no verification detail
        """
        analysis = self.check_liveness(audio)
        if not analysis.is_human:
            logger.info(f"Liveness check failed: {'; '.join(analysis.reasons)}")
            return AuthenticationResult(
                match=False,
                confidence=0.0,
                deepfake_analysis=analysis,
                reason="synthetic_speech",
            )

        test = self.extractor.extract(audio)
        result = self.extractor.verify(test, stored, self.threshold)
        return AuthenticationResult(
            match=result.match,
            confidence=result.confidence,
            deepfake_analysis=analysis,
            verification=result,
            reason="" if result.match else "voice_mismatch",
        )

    def verify_serialized(self, audio, stored_data: str) -> AuthenticationResult:
        """Like :meth:`verify`, reading the reference from its stored form.

        An unreadable reference yields a non-match instead of an exception.
        """
        stored = self.extractor.deserialize(stored_data)
        if stored is None:
            logger.warning("Stored voiceprint could not be read")
            return AuthenticationResult(match=False, confidence=0.0, reason="invalid_reference")
        return self.verify(audio, stored)
