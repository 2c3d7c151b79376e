#!/usr/bin/env python3
"""
Generate sample WAV recordings for Voxgate testing.
"""
import os
import sys

import numpy as np

sys.path.append(os.path.join(os.path.dirname(__file__), '../python'))

from voxgate.audio_io import encode_wav

SR = 16000


def create_phrase(seed, filename, f0=140.0, duration=3.0):
    """Harmonic syllables with pauses and a breath-level noise floor."""
    rng = np.random.default_rng(seed)
    n = int(SR * duration)
    t = np.arange(n) / SR

    syllable = (t // 0.3).astype(int)
    pos = t - syllable * 0.3
    n_syllables = syllable.max() + 1

    f0_track = f0 * (1 + 0.02 * rng.standard_normal(n_syllables))
    phase = 2 * np.pi * np.cumsum(f0_track[syllable] / SR)
    voice = sum((1.0 / h) * np.sin(h * phase) for h in range(1, 9))
    envelope = np.where(pos < 0.2, np.sin(np.pi * np.clip(pos / 0.2, 0, 1)), 0.0)
    shimmer = 1 + 0.05 * rng.standard_normal(n_syllables)

    audio = 0.25 * shimmer[syllable] * envelope * voice + 0.015 * rng.standard_normal(n)
    write(filename, audio)


def create_tone(filename, freq=440.0, duration=3.0):
    """Steady sine: rejected by the liveness check."""
    t = np.arange(int(SR * duration)) / SR
    write(filename, 0.5 * np.sin(2 * np.pi * freq * t))


def create_noise(filename, duration=3.0):
    """White noise: never matches an enrolled voice."""
    write(filename, 0.3 * np.random.default_rng(99).standard_normal(int(SR * duration)))


def write(filename, audio):
    with open(filename, 'wb') as f:
        f.write(encode_wav(audio, SR))
    print(f"Created {filename}")


os.makedirs('test-data/speaker-a', exist_ok=True)
os.makedirs('test-data/speaker-b', exist_ok=True)
os.makedirs('test-data/synthetic', exist_ok=True)

print("Generating sample recordings...")
print("=" * 50)

for take in range(1, 5):
    create_phrase(take, f'test-data/speaker-a/take{take}.wav')
create_phrase(50, 'test-data/speaker-b/take1.wav', f0=210.0)
create_tone('test-data/synthetic/tone.wav')
create_noise('test-data/synthetic/noise.wav')

print("=" * 50)
print("✓ All sample recordings created successfully!")
print("\nYou can now:")
print("  1. Enroll: voxgate enroll test-data/speaker-a/take[1-3].wav -o signature.json")
print("  2. Verify: voxgate verify test-data/speaker-a/take4.wav -s signature.json")
print("  3. Check liveness: voxgate detect test-data/synthetic/tone.wav")
