"""Shared pytest fixtures for Voxgate tests."""

import numpy as np
import pytest

from voxgate.audio_io import encode_wav
from voxgate.signature import extract_voice_signature

SR = 16000


# ---------------------------------------------------------------------------
# Audio generators
# ---------------------------------------------------------------------------


def synth_phrase(seed: int, duration: float = 3.0, sr: int = SR,
                 f0: float = 140.0, amplitude: float = 0.25,
                 breath_level: float = 0.015) -> np.ndarray:
    """Simulate one speaker saying a fixed phrase.

    The phrase is a train of 0.2 s voiced syllables (8 harmonics under a
    half-sine envelope) separated by 0.1 s breathy pauses, on top of a
    constant noise floor. Syllable timing is identical for every seed, so
    different seeds behave like repeated takes of the same passphrase.
    """
    rng = np.random.default_rng(seed)
    n = int(sr * duration)
    t = np.arange(n) / sr

    period, voiced_len = 0.3, 0.2
    syllable = (t // period).astype(int)
    pos = t - syllable * period
    voiced = pos < voiced_len

    # Per-syllable pitch and loudness drift
    n_syllables = syllable.max() + 1
    f0_drift = f0 * (1 + 0.02 * rng.standard_normal(n_syllables))
    shimmer = 1 + 0.05 * rng.standard_normal(n_syllables)
    phase = 2 * np.pi * np.cumsum(f0_drift[syllable] / sr)

    harmonics = np.zeros(n)
    for h in range(1, 9):
        harmonics += (1.0 / h) * np.sin(h * phase)

    envelope = np.where(voiced, np.sin(np.pi * np.clip(pos / voiced_len, 0, 1)), 0.0)
    speech = amplitude * shimmer[syllable] * envelope * harmonics
    return speech + breath_level * rng.standard_normal(n)


def white_noise(seed: int = 99, duration: float = 3.0, sr: int = SR,
                level: float = 0.3) -> np.ndarray:
    return level * np.random.default_rng(seed).standard_normal(int(sr * duration))


def sine(freq: float = 440.0, duration: float = 2.0, sr: int = SR,
         amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(sr * duration)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def enrollment_audio():
    """Three takes of the same phrase by the same simulated speaker."""
    return [synth_phrase(seed) for seed in (1, 2, 3)]


@pytest.fixture()
def probe_audio():
    """A fourth take by the enrolled speaker."""
    return synth_phrase(4)


@pytest.fixture()
def phrase_signature():
    return extract_voice_signature(synth_phrase(11))


@pytest.fixture()
def phrase_wav_files(tmp_path):
    """Four phrase takes written as 16-bit WAV files."""
    paths = []
    for seed in (1, 2, 3, 4):
        path = tmp_path / f"take{seed}.wav"
        path.write_bytes(encode_wav(synth_phrase(seed)))
        paths.append(path)
    return paths
