"""WAV decoding and resampling to the analysis sample rate."""
import io
import logging
import wave
from math import gcd
from typing import Tuple

import numpy as np
from scipy import signal

from .config import SAMPLE_RATE
from .errors import AudioDecodeError

logger = logging.getLogger(__name__)


def decode_wav(audio_bytes: bytes) -> Tuple[np.ndarray, int]:
    """Decode WAV bytes to mono float32 samples + sample rate.

    Supports 8-bit, 16-bit, 24-bit, and 32-bit PCM WAV files.
    Returns (samples_float32_mono, sample_rate).
    """
    try:
        buf = io.BytesIO(audio_bytes)
        with wave.open(buf, 'rb') as wf:
            sr = wf.getframerate()
            n_channels = wf.getnchannels()
            sampwidth = wf.getsampwidth()
            raw = wf.readframes(wf.getnframes())
    except (wave.Error, EOFError) as e:
        raise AudioDecodeError(f"Audio decode failed: {e}") from e

    if sampwidth == 1:
        samples = np.frombuffer(raw, dtype=np.uint8).astype(np.float32) / 128.0 - 1.0
    elif sampwidth == 2:
        samples = np.frombuffer(raw, dtype=np.int16).astype(np.float32) / 32768.0
    elif sampwidth == 3:
        # 24-bit: vectorized unpack of 3-byte little-endian samples
        raw_arr = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3)
        samples = (raw_arr[:, 0].astype(np.int32)
                   | (raw_arr[:, 1].astype(np.int32) << 8)
                   | (raw_arr[:, 2].astype(np.int32) << 16))
        samples = np.where(samples >= 0x800000, samples - 0x1000000, samples)
        samples = samples.astype(np.float32) / 8388608.0
    elif sampwidth == 4:
        samples = np.frombuffer(raw, dtype=np.int32).astype(np.float32) / 2147483648.0
    else:
        raise AudioDecodeError(f"Unsupported sample width: {sampwidth}")

    if n_channels > 1:
        samples = samples.reshape(-1, n_channels).mean(axis=1)

    return samples, sr


def resample(samples: np.ndarray, source_rate: int, target_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Polyphase resampling between integer sample rates."""
    if source_rate == target_rate:
        return samples
    g = gcd(source_rate, target_rate)
    out = signal.resample_poly(samples, target_rate // g, source_rate // g)
    return out.astype(np.float32)


def load_audio(audio_bytes: bytes, target_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Decode a WAV file and bring it to ``target_rate`` mono float32."""
    samples, sr = decode_wav(audio_bytes)
    if sr != target_rate:
        logger.debug(f"Resampling {sr} Hz -> {target_rate} Hz")
    return resample(samples, sr, target_rate)


def encode_wav(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Encode float mono samples in [-1, 1] as 16-bit PCM WAV."""
    pcm = (np.clip(samples, -1, 1) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, 'wb') as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()
