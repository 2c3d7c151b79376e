"""Windowing and an in-place radix-2 FFT."""
import numpy as np


def hamming_window(size: int) -> np.ndarray:
    """Symmetric Hamming window: 0.54 - 0.46 cos(2 pi i / (size - 1))."""
    if size == 1:
        return np.ones(1)
    i = np.arange(size)
    return 0.54 - 0.46 * np.cos(2.0 * np.pi * i / (size - 1))


def bit_reversal_permutation(n: int) -> np.ndarray:
    """Indices that reorder a length-n sequence into bit-reversed order."""
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def fft(real: np.ndarray, imag: np.ndarray) -> None:
    """Iterative Cooley-Tukey FFT, computed in place over the last axis.

    ``real`` and ``imag`` must have the same shape and a power-of-two last
    dimension; the length is not checked. A 2-D input transforms every row
    at once, which is how the frame pipeline calls it.

    Args:
        real: Real parts, overwritten with the transform's real parts.
        imag: Imaginary parts, overwritten likewise.
    """
    n = real.shape[-1]
    if n <= 1:
        return
    if not (real.flags.c_contiguous and imag.flags.c_contiguous):
        raise ValueError("fft requires C-contiguous arrays to work in place")

    perm = bit_reversal_permutation(n)
    real[...] = real[..., perm]
    imag[...] = imag[..., perm]

    lead = real.shape[:-1]
    size = 2
    while size <= n:
        half = size // 2
        angle = -2.0 * np.pi * np.arange(half) / size
        cos = np.cos(angle)
        sin = np.sin(angle)

        # Views: each row of length n split into n/size butterfly groups
        re = real.reshape(lead + (n // size, size))
        im = imag.reshape(lead + (n // size, size))
        even_re, odd_re = re[..., :half], re[..., half:]
        even_im, odd_im = im[..., :half], im[..., half:]

        t_re = cos * odd_re - sin * odd_im
        t_im = sin * odd_re + cos * odd_im

        odd_re[...] = even_re - t_re
        odd_im[...] = even_im - t_im
        even_re += t_re
        even_im += t_im

        size *= 2
