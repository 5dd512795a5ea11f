"""
Numba-optimized kernels for per-pixel LUT application.

Every buffer stage is expressed as one or more 256-entry byte lookup tables,
so the per-pixel work reduces to table lookups on the RGB bytes of an RGBA
buffer. Alpha is never touched.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_lut_numba(pixels: NDArray[np.uint8], lut: NDArray[np.uint8]) -> None:
    """
    Apply one LUT to the R, G and B bytes of every pixel, in-place.

    Args:
        pixels: RGBA pixels [N, 4] (modified in-place)
        lut: Lookup table [256]
    """
    n = pixels.shape[0]

    for i in prange(n):
        pixels[i, 0] = lut[pixels[i, 0]]
        pixels[i, 1] = lut[pixels[i, 1]]
        pixels[i, 2] = lut[pixels[i, 2]]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_channel_luts_numba(
    pixels: NDArray[np.uint8],
    lut_r: NDArray[np.uint8],
    lut_g: NDArray[np.uint8],
    lut_b: NDArray[np.uint8],
) -> None:
    """
    Apply a separate LUT per channel, in-place.

    Args:
        pixels: RGBA pixels [N, 4] (modified in-place)
        lut_r: Red lookup table [256]
        lut_g: Green lookup table [256]
        lut_b: Blue lookup table [256]
    """
    n = pixels.shape[0]

    for i in prange(n):
        pixels[i, 0] = lut_r[pixels[i, 0]]
        pixels[i, 1] = lut_g[pixels[i, 1]]
        pixels[i, 2] = lut_b[pixels[i, 2]]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_curves_numba(
    pixels: NDArray[np.uint8],
    lut_r: NDArray[np.uint8],
    lut_g: NDArray[np.uint8],
    lut_b: NDArray[np.uint8],
    lut_master: NDArray[np.uint8],
) -> None:
    """
    Apply per-channel curves followed by the master curve, in-place.

    The channel LUT is always applied first: ``out = master[channel[in]]``.

    Args:
        pixels: RGBA pixels [N, 4] (modified in-place)
        lut_r: Red curve LUT [256]
        lut_g: Green curve LUT [256]
        lut_b: Blue curve LUT [256]
        lut_master: Master curve LUT [256]
    """
    n = pixels.shape[0]

    for i in prange(n):
        pixels[i, 0] = lut_master[lut_r[pixels[i, 0]]]
        pixels[i, 1] = lut_master[lut_g[pixels[i, 1]]]
        pixels[i, 2] = lut_master[lut_b[pixels[i, 2]]]


def offset_lut(offset: float) -> NDArray[np.uint8]:
    """
    Build the LUT of a clamped constant byte offset.

    Fractional results round half to even, like a clamped byte store.

    Args:
        offset: Value added to every byte

    Returns:
        Lookup table [256]
    """
    values = np.arange(256, dtype=np.float64) + offset
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def pixel_view(data: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """
    Return an [N, 4] view of an RGBA buffer for the kernels.

    Args:
        data: RGBA array [H, W, 4], C-contiguous

    Returns:
        View sharing memory with ``data``
    """
    return data.reshape(-1, 4)


def warmup_kernels() -> None:
    """Compile all kernels once on a tiny buffer."""
    pixels = np.zeros((4, 4), dtype=np.uint8)
    lut = np.arange(256, dtype=np.uint8)
    apply_lut_numba(pixels, lut)
    apply_channel_luts_numba(pixels, lut, lut, lut)
    apply_curves_numba(pixels, lut, lut, lut, lut)
