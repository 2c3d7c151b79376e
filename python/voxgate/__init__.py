"""
Voxgate - Python Implementation

Voice passphrase authentication with a liveness gate against synthetic
speech: MFCC voice signatures, enrollment averaging and strict
multi-factor verification.
"""

from .auth import VoiceAuthenticator
from .types import (
    VoiceSignature,
    DeepfakeMetrics,
    DeepfakeAnalysis,
    VerificationDetails,
    VerificationResult,
    EnrollmentResult,
    AuthenticationResult,
    SpeakerEmbedding,
)
from .config import FeatureConfig
from .filterbank import SpectralBank, DEFAULT_BANK
from .mfcc import extract_mfcc
from .signature import (
    extract_voice_signature,
    average_signatures,
    serialize_signature,
    deserialize_signature,
)
from .deepfake import DeepfakeDetector, detect_deepfake, is_likely_human_voice
from .verify import VoiceVerifier, cosine_similarity, verify_voice_strict
from .extraction import (
    SignatureExtractor,
    StatisticalExtractor,
    EmbeddingExtractor,
    create_extractor,
)
from .audio_io import load_audio
from .errors import VoxgateError

__version__ = "0.1.0"
__all__ = [
    "VoiceAuthenticator",
    "VoiceSignature",
    "DeepfakeMetrics",
    "DeepfakeAnalysis",
    "VerificationDetails",
    "VerificationResult",
    "EnrollmentResult",
    "AuthenticationResult",
    "SpeakerEmbedding",
    "FeatureConfig",
    "SpectralBank",
    "DEFAULT_BANK",
    "extract_mfcc",
    "extract_voice_signature",
    "average_signatures",
    "serialize_signature",
    "deserialize_signature",
    "DeepfakeDetector",
    "detect_deepfake",
    "is_likely_human_voice",
    "VoiceVerifier",
    "cosine_similarity",
    "verify_voice_strict",
    "SignatureExtractor",
    "StatisticalExtractor",
    "EmbeddingExtractor",
    "create_extractor",
    "load_audio",
    "VoxgateError",
]
