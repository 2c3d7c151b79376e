"""
Liveness check for synthetic (AI-generated) speech.

Five independent heuristics, each worth one point:

  1. Spectral flatness: harmonic structure of the power spectrum
  2. Temporal variation: frame-to-frame RMS energy changes
  3. Pitch variation: spread of the per-frame zero-crossing rate
  4. Breath detection: quiet frames with noisy, high-frequency content
  5. Micro-variations: jitter between consecutive amplitude peaks

A buffer is judged human when at least three checks pass. The detector is
stateless and must run before any signature comparison.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from .config import DEFAULT_LIVENESS_THRESHOLD
from .errors import EmptyAudioError
from .filterbank import DEFAULT_BANK, SpectralBank
from .mfcc import frame_signal, power_spectrum
from .types import DeepfakeAnalysis, DeepfakeMetrics

logger = logging.getLogger(__name__)

HUMAN_VERDICT = 'Voice appears natural and human'


class DeepfakeDetector:
    """Heuristic human / synthetic speech classifier.

    Scoring: confidence = passed checks / 5; ``is_human`` when confidence
    reaches ``human_threshold`` (0.6, i.e. three of five checks).
    """

    MAX_SCORE = 5

    THRESHOLDS = {
        'flatness_min': 0.08,          # Below → too harmonic / tonal
        'flatness_max': 0.45,          # Above → noise-like vocoder output
        'temporal_variation_min': 0.005,
        'pitch_variation_min': 0.01,
        'breath_rms_min': 0.005,       # Quieter than this is silence
        'breath_rms_max': 0.05,        # Louder than this is voiced speech
        'breath_hf_ratio_min': 0.5,
        'breath_frames_min': 2,        # Need strictly more breath-like frames
        'peak_amplitude_min': 0.1,
        'peak_count_min': 10,
        'micro_variation_min': 0.02,
        'micro_variation_max': 0.3,
    }

    REASONS = {
        'spectral_flatness': 'Unnatural spectral characteristics detected',
        'temporal_variation': 'Voice energy too consistent (lacks natural variation)',
        'pitch_variation': 'Pitch too monotone (lacks natural fluctuation)',
        'breath': 'No natural breath sounds detected',
        'micro_variations': 'Amplitude patterns appear artificial',
    }

    def __init__(self, bank: SpectralBank = DEFAULT_BANK,
                 thresholds: Optional[Dict[str, float]] = None,
                 human_threshold: float = DEFAULT_LIVENESS_THRESHOLD):
        """Initialize DeepfakeDetector.

        Args:
            bank: Spectral constants used for the flatness analysis.
            thresholds: Overrides merged over :attr:`THRESHOLDS`.
            human_threshold: Minimum confidence for a human verdict.
        """
        self._bank = bank
        self.thresholds = {**self.THRESHOLDS, **(thresholds or {})}
        self.human_threshold = human_threshold

    def detect(self, audio) -> DeepfakeAnalysis:
        """Classify an audio buffer as human or synthetic speech.

        Raises:
            EmptyAudioError: the buffer has no samples.
        """
        samples = np.asarray(audio, dtype=np.float64).ravel()
        if samples.size == 0:
            raise EmptyAudioError("Audio buffer is empty")

        t = self.thresholds
        reasons: List[str] = []
        score = 0

        spectral_flatness = self.spectral_flatness(samples)
        if t['flatness_min'] <= spectral_flatness <= t['flatness_max']:
            score += 1
        else:
            reasons.append(self.REASONS['spectral_flatness'])

        temporal_variation = self.temporal_variation(samples)
        if temporal_variation > t['temporal_variation_min']:
            score += 1
        else:
            reasons.append(self.REASONS['temporal_variation'])

        pitch_variation = self.pitch_variation(samples)
        if pitch_variation > t['pitch_variation_min']:
            score += 1
        else:
            reasons.append(self.REASONS['pitch_variation'])

        breath_detected = self.detect_breath(samples)
        if breath_detected:
            score += 1
        else:
            reasons.append(self.REASONS['breath'])

        micro_variations = self.micro_variations(samples)
        if t['micro_variation_min'] < micro_variations < t['micro_variation_max']:
            score += 1
        else:
            reasons.append(self.REASONS['micro_variations'])

        confidence = score / self.MAX_SCORE
        is_human = confidence >= self.human_threshold

        logger.debug(
            f"Liveness score {score}/{self.MAX_SCORE}: flatness={spectral_flatness:.4f} "
            f"temporal={temporal_variation:.4f} pitch={pitch_variation:.4f} "
            f"breath={breath_detected} micro={micro_variations:.4f}"
        )

        return DeepfakeAnalysis(
            is_human=is_human,
            confidence=confidence,
            reasons=[HUMAN_VERDICT] if is_human else reasons,
            metrics=DeepfakeMetrics(
                spectral_flatness=spectral_flatness,
                temporal_variation=temporal_variation,
                pitch_variation=pitch_variation,
                breath_detected=breath_detected,
                micro_variations=micro_variations,
            ),
        )

    # ------------------------------------------------------------------
    # 1. Spectral Flatness (Wiener entropy)
    # ------------------------------------------------------------------
    def spectral_flatness(self, samples: np.ndarray) -> float:
        """Mean per-frame ratio of geometric to arithmetic spectral mean.

        Harmonic speech sits well below 1; synthetic output tends to be
        either too flat (noise-like) or too tonal. DC and Nyquist bins and
        bins with power <= 1e-10 are ignored.
        """
        cfg = self._bank.config
        frames = frame_signal(samples, cfg.fft_size, cfg.fft_size // 2)
        if frames.shape[0] == 0:
            return 0.0

        power = power_spectrum(frames, self._bank)[:, 1:cfg.fft_size // 2]
        valid = power > 1e-10
        counts = valid.sum(axis=1)
        keep = counts > 0
        if not np.any(keep):
            return 0.0

        power, valid, counts = power[keep], valid[keep], counts[keep]
        log_power = np.log(np.where(valid, power, 1.0))
        geometric = np.exp(np.where(valid, log_power, 0.0).sum(axis=1) / counts)
        arithmetic = np.where(valid, power, 0.0).sum(axis=1) / counts
        flatness = geometric / (arithmetic + 1e-10)
        return float(np.mean(flatness))

    # ------------------------------------------------------------------
    # 2. Temporal Variation
    # ------------------------------------------------------------------
    def temporal_variation(self, samples: np.ndarray, frame_size: int = 256) -> float:
        """Std of absolute RMS changes between consecutive 256-sample frames."""
        n_frames = len(samples) // frame_size
        if n_frames < 2:
            return 0.0
        frames = samples[:n_frames * frame_size].reshape(n_frames, frame_size)
        rms = np.sqrt(np.mean(frames ** 2, axis=1))
        return float(np.std(np.abs(np.diff(rms))))

    # ------------------------------------------------------------------
    # 3. Pitch Variation (zero-crossing proxy)
    # ------------------------------------------------------------------
    def pitch_variation(self, samples: np.ndarray, frame_size: int = 512) -> float:
        """Std of per-frame zero-crossing rate over 50%-overlapped frames."""
        frames = frame_signal(samples, frame_size, frame_size // 2)
        if frames.shape[0] < 2:
            return 0.0
        positive = frames >= 0
        zcr = np.count_nonzero(positive[:, 1:] != positive[:, :-1], axis=1) / frame_size
        return float(np.std(zcr))

    # ------------------------------------------------------------------
    # 4. Breath Detection
    # ------------------------------------------------------------------
    def detect_breath(self, samples: np.ndarray, frame_size: int = 512) -> bool:
        """Look for quiet frames dominated by high-frequency content.

        High-frequency energy is approximated by the RMS of first
        differences inside each frame.
        """
        t = self.thresholds
        n_frames = len(samples) // frame_size
        if n_frames == 0:
            return False
        frames = samples[:n_frames * frame_size].reshape(n_frames, frame_size)

        rms = np.sqrt(np.sum(frames ** 2, axis=1) / frame_size)
        rms_high = np.sqrt(np.sum(np.diff(frames, axis=1) ** 2, axis=1) / (frame_size - 1))

        quiet = (rms > t['breath_rms_min']) & (rms < t['breath_rms_max'])
        breathy = quiet & (rms_high / (rms + 1e-10) > t['breath_hf_ratio_min'])
        breath_frames = int(np.count_nonzero(breathy))
        logger.debug(f"Breath-like frames: {breath_frames} of {int(np.count_nonzero(quiet))} quiet")
        return breath_frames > t['breath_frames_min']

    # ------------------------------------------------------------------
    # 5. Micro-variations (amplitude jitter)
    # ------------------------------------------------------------------
    def micro_variations(self, samples: np.ndarray) -> float:
        """Mean absolute change between consecutive peaks over mean peak height.

        Returns 0 when fewer than 10 peaks exceed the amplitude floor.
        """
        t = self.thresholds
        if len(samples) < 3:
            return 0.0
        mid = samples[1:-1]
        is_peak = (mid > samples[:-2]) & (mid > samples[2:]) & (mid > t['peak_amplitude_min'])
        peaks = mid[is_peak]
        if len(peaks) < t['peak_count_min']:
            return 0.0
        mean_diff = np.mean(np.abs(np.diff(peaks)))
        return float(mean_diff / (np.mean(peaks) + 1e-10))


_default_detector = DeepfakeDetector()


def detect_deepfake(audio) -> DeepfakeAnalysis:
    """Run the default liveness check on an audio buffer."""
    return _default_detector.detect(audio)


def is_likely_human_voice(audio, threshold: float = DEFAULT_LIVENESS_THRESHOLD) -> bool:
    """Quick yes/no liveness check."""
    analysis = detect_deepfake(audio)
    return analysis.is_human and analysis.confidence >= threshold
