"""RGBA pixel buffer container."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class PixelBuffer:
    """Decoded RGBA raster.

    Attributes:
        data: Pixel bytes, shape [height, width, 4], dtype uint8, C-contiguous

    Example:
        >>> buf = PixelBuffer.blank(4, 2)
        >>> buf.width, buf.height
        (4, 2)
    """

    data: np.ndarray

    def __post_init__(self):
        data = self.data
        if not isinstance(data, np.ndarray):
            raise ValueError(f"PixelBuffer data must be a numpy array, got {type(data).__name__}")
        if data.dtype != np.uint8:
            raise ValueError(f"PixelBuffer data must be uint8, got {data.dtype}")
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"PixelBuffer data must have shape (H, W, 4), got {data.shape}")
        if not data.flags["C_CONTIGUOUS"]:
            self.data = np.ascontiguousarray(data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Create a buffer from an RGB or RGBA uint8 array.

        RGB input gets an opaque alpha channel. The result never shares
        memory with ``array``.

        :param array: Array of shape [H, W, 3] or [H, W, 4]
        :returns: New PixelBuffer
        :raises ValueError: If the array is not uint8 RGB/RGBA
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {array.dtype}")
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            return cls(np.concatenate([array, alpha], axis=2))
        return cls(np.array(array, dtype=np.uint8, copy=True, order="C"))

    @classmethod
    def blank(cls, width: int, height: int, fill: tuple[int, int, int, int] = (0, 0, 0, 255)):
        """Create a buffer filled with one RGBA value."""
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[...] = np.asarray(fill, dtype=np.uint8)
        return cls(data)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def size(self) -> int:
        """Number of pixels."""
        return self.width * self.height

    @property
    def rgb(self) -> np.ndarray:
        """View of the RGB channels [H, W, 3]."""
        return self.data[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel [H, W]."""
        return self.data[..., 3]

    @property
    def is_read_only(self) -> bool:
        return not self.data.flags.writeable

    def copy(self) -> PixelBuffer:
        """Independent, writable copy."""
        return PixelBuffer(self.data.copy())

    def freeze(self) -> PixelBuffer:
        """Mark the underlying array read-only and return self."""
        self.data.flags.writeable = False
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and bool(np.array_equal(self.data, other.data))

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
