"""
MFCC feature extraction for voice biometrics.

Each analysis frame goes through:
  window -> zero-pad -> FFT -> power spectrum -> mel filterbank
  -> log(energy + 1e-10) -> DCT-II (first 13 coefficients)

All functions take the analysis constants as an explicit ``bank`` argument
defaulting to the module-level DEFAULT_BANK.
"""

import logging

import numpy as np

from .filterbank import DEFAULT_BANK, SpectralBank, dct_basis
from .transform import fft

logger = logging.getLogger(__name__)

LOG_FLOOR = 1e-10


def dct(values, num_coeffs: int) -> np.ndarray:
    """DCT-II of the last axis, keeping the first ``num_coeffs`` outputs.

    out[k] = sum_i values[i] * cos(pi * k * (2i + 1) / (2n))
    """
    values = np.asarray(values, dtype=np.float64)
    basis = dct_basis(values.shape[-1], num_coeffs)
    return values @ basis.T


def frame_signal(audio: np.ndarray, frame_size: int, hop_size: int) -> np.ndarray:
    """Split audio into overlapping full frames, dropping the partial tail.

    Returns a C-contiguous array of shape (n_frames, frame_size).
    """
    audio = np.asarray(audio, dtype=np.float64)
    if len(audio) < frame_size:
        return np.zeros((0, frame_size))
    windows = np.lib.stride_tricks.sliding_window_view(audio, frame_size)[::hop_size]
    return np.ascontiguousarray(windows)


def power_spectrum(frames: np.ndarray, bank: SpectralBank = DEFAULT_BANK) -> np.ndarray:
    """Windowed power spectrum of each row, bins [0, fft_size//2 + 1)."""
    cfg = bank.config
    frames = np.atleast_2d(np.asarray(frames, dtype=np.float64))
    n = min(frames.shape[1], cfg.fft_size)

    real = np.zeros((frames.shape[0], cfg.fft_size))
    real[:, :n] = frames[:, :n] * bank.window[:n]
    imag = np.zeros_like(real)
    fft(real, imag)

    half = cfg.num_bins
    return real[:, :half] ** 2 + imag[:, :half] ** 2


def _cepstra(frames: np.ndarray, bank: SpectralBank) -> np.ndarray:
    power = power_spectrum(frames, bank)
    mel_energies = np.log(power @ bank.filters.T + LOG_FLOOR)
    return mel_energies @ bank.dct.T


def extract_frame_mfcc(frame, bank: SpectralBank = DEFAULT_BANK) -> np.ndarray:
    """MFCC vector of a single frame; frames shorter than fft_size are zero-padded."""
    return _cepstra(np.asarray(frame, dtype=np.float64)[None, :], bank)[0]


def extract_mfcc(audio, bank: SpectralBank = DEFAULT_BANK) -> np.ndarray:
    """Extract MFCC features from an audio buffer.

    Args:
        audio: Mono samples at ``bank.config.sample_rate``.
        bank: Analysis constants.

    Returns:
        Array of shape (n_frames, num_mfcc_coeffs), one row per 50%-overlapped
        frame. Empty (0 rows) when the audio is shorter than one frame.
    """
    cfg = bank.config
    frames = frame_signal(audio, cfg.fft_size, cfg.hop_size)
    if frames.shape[0] == 0:
        return np.zeros((0, cfg.num_mfcc_coeffs))
    mfcc = _cepstra(frames, bank)
    logger.debug(f"Extracted {mfcc.shape[0]} MFCC frames")
    return mfcc
