"""Mel filterbank and the immutable spectral constants shared by extractors."""
from dataclasses import dataclass

import numpy as np

from .config import FeatureConfig
from .transform import hamming_window


def hz_to_mel(hz):
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    return 700.0 * (10.0 ** (np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


def create_mel_filter_bank(fft_size: int, sample_rate: int, num_filters: int,
                           min_freq: float, max_freq: float) -> np.ndarray:
    """Build a mel-scale triangular filterbank matrix (num_filters x fft_size//2+1).

    Filter edges are ``num_filters + 2`` points equally spaced on the mel
    scale, mapped to FFT bins with ``floor((fft_size + 1) * f / sample_rate)``.
    """
    n_bins = fft_size // 2 + 1
    mel_points = np.linspace(hz_to_mel(min_freq), hz_to_mel(max_freq), num_filters + 2)
    hz_points = mel_to_hz(mel_points)
    bin_points = np.floor((fft_size + 1) * hz_points / sample_rate).astype(int)
    bin_points = np.minimum(bin_points, n_bins - 1)

    fb = np.zeros((num_filters, n_bins))
    for m in range(num_filters):
        f_left = bin_points[m]
        f_center = bin_points[m + 1]
        f_right = bin_points[m + 2]
        for k in range(f_left, f_center):
            fb[m, k] = (k - f_left) / (f_center - f_left)
        for k in range(f_center, f_right):
            fb[m, k] = (f_right - k) / (f_right - f_center)
    return fb


def dct_basis(num_inputs: int, num_coeffs: int) -> np.ndarray:
    """Unnormalized DCT-II matrix: row k holds cos(pi k (2i+1) / 2n)."""
    k = np.arange(num_coeffs)[:, None]
    i = np.arange(num_inputs)[None, :]
    return np.cos(np.pi * k * (2 * i + 1) / (2 * num_inputs))


@dataclass(frozen=True, eq=False)
class SpectralBank:
    """Read-only analysis constants derived from a FeatureConfig.

    Holds the mel filters, the analysis window and the DCT basis. Build one
    with :meth:`from_config` and pass it to every extraction call; the arrays
    are flagged read-only so sharing across threads is safe.
    """
    config: FeatureConfig
    filters: np.ndarray
    window: np.ndarray
    dct: np.ndarray

    @classmethod
    def from_config(cls, config: FeatureConfig = FeatureConfig()) -> "SpectralBank":
        filters = create_mel_filter_bank(
            config.fft_size,
            config.sample_rate,
            config.num_mel_filters,
            config.min_freq,
            config.max_freq,
        )
        window = hamming_window(config.fft_size)
        basis = dct_basis(config.num_mel_filters, config.num_mfcc_coeffs)
        for arr in (filters, window, basis):
            arr.setflags(write=False)
        return cls(config=config, filters=filters, window=window, dct=basis)


DEFAULT_BANK = SpectralBank.from_config(FeatureConfig())
