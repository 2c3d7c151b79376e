"""Configuration constants for Voxgate."""
from dataclasses import dataclass


@dataclass(frozen=True)
class FeatureConfig:
    """Parameters of the MFCC front end.

    The defaults describe 16 kHz mono speech analysed in 32 ms frames with
    50% overlap. A config is hashable and immutable, so one instance can be
    shared by every extractor in the process.
    """
    sample_rate: int = 16000
    fft_size: int = 512
    hop_size: int = 256
    num_mel_filters: int = 26
    num_mfcc_coeffs: int = 13
    min_freq: float = 0.0
    max_freq: float = 8000.0

    @property
    def num_bins(self) -> int:
        """Number of power-spectrum bins kept per frame."""
        return self.fft_size // 2 + 1


SAMPLE_RATE = 16000

# Below these the signature is still produced but flagged as degraded
MIN_RELIABLE_SAMPLES = SAMPLE_RATE
MIN_RELIABLE_FRAMES = 10

# Recommended passphrase recording length (seconds)
MIN_PASSPHRASE_DURATION = 2.5
MAX_PASSPHRASE_DURATION = 6.0

REQUIRED_ENROLLMENT_SAMPLES = 3

DEFAULT_VERIFY_THRESHOLD = 0.92
DEFAULT_EMBEDDING_THRESHOLD = 0.75
DEFAULT_LIVENESS_THRESHOLD = 0.6

# Defaults for signatures stored before variance/delta/energy tracking
LEGACY_VARIANCE = 0.1
LEGACY_DELTA = 0.0
LEGACY_ENERGY = 0.01
LEGACY_ZERO_CROSSING_RATE = 0.1
LEGACY_FRAME_COUNT = 50.0
