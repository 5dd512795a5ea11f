"""Shared fixtures: host image stand-ins and sample buffers."""

import numpy as np
import pytest

from pixgrade import PixelBuffer, Transform


class HostImage:
    """Minimal host image object (weak-referenceable, with a transform)."""

    def __init__(self, pixels, decoded=True, transform=None):
        self.pixels = pixels
        self.decoded = decoded
        self.transform = transform if transform is not None else Transform()
        self.reads = 0

    @property
    def is_decoded(self):
        return self.decoded

    def read_pixels(self):
        self.reads += 1
        return self.pixels

    def __repr__(self):
        return f"HostImage({self.pixels.shape[1]}x{self.pixels.shape[0]})"


@pytest.fixture
def rgba_pixels():
    """Random 16x12 RGBA pixels with varied alpha."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8)


@pytest.fixture
def sample_buffer(rgba_pixels):
    return PixelBuffer.from_array(rgba_pixels)


@pytest.fixture
def ramp_buffer():
    """1x256 buffer whose R, G and B bytes equal the column index."""
    ramp = np.arange(256, dtype=np.uint8)
    data = np.empty((1, 256, 4), dtype=np.uint8)
    data[0, :, 0] = ramp
    data[0, :, 1] = ramp
    data[0, :, 2] = ramp
    data[0, :, 3] = 255
    return PixelBuffer(data)


@pytest.fixture
def host_image(rgba_pixels):
    return HostImage(rgba_pixels, transform=Transform(left=10.0, top=20.0, angle=15.0))


@pytest.fixture
def make_image():
    """Factory for host images."""

    def _make(pixels=None, decoded=True, transform=None):
        if pixels is None:
            pixels = np.full((4, 4, 4), 128, dtype=np.uint8)
        return HostImage(pixels, decoded=decoded, transform=transform)

    return _make
