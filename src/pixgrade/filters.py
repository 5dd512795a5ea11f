"""Delegated finishing filters.

Hue, saturation, lightness, sharpen, clarity and vignette are not computed by
the buffer stages. They are described as a list of :class:`RasterFilter`
values that the host's filter backend applies on top of the graded raster.
The list always fully replaces any previous one.

:class:`ReferenceFilterBackend` implements the same filter semantics with
NumPy and Pillow so the results can be previewed and tested without a host.

Example:
    >>> finish = FinishValues(hue=30, sharpen=25)
    >>> [f.kind for f in build_filter_list(finish)]
    ['HueRotation', 'Convolute']
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import ClassVar

import numpy as np
from PIL import Image, ImageFilter

from pixgrade.buffer import PixelBuffer
from pixgrade.config.values import FinishValues
from pixgrade.protocols import RasterFilter

logger = logging.getLogger(__name__)


# ============================================================================
# Filter descriptions
# ============================================================================


@dataclass(frozen=True)
class HueRotation:
    """Rotate hues; ``rotation`` in [-1, 1] is a fraction of pi radians."""

    kind: ClassVar[str] = "HueRotation"
    rotation: float

    def to_dict(self) -> dict:
        return {"type": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Saturation:
    """Saturation adjustment in [-1, 1]; -1 is grayscale."""

    kind: ClassVar[str] = "Saturation"
    saturation: float

    def to_dict(self) -> dict:
        return {"type": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Brightness:
    """Additive brightness in [-1, 1], as a fraction of full scale."""

    kind: ClassVar[str] = "Brightness"
    brightness: float

    def to_dict(self) -> dict:
        return {"type": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Convolute:
    """3x3 convolution, row-major ``matrix`` of 9 weights."""

    kind: ClassVar[str] = "Convolute"
    matrix: tuple[float, ...]

    def __post_init__(self):
        if len(self.matrix) != 9:
            raise ValueError(f"Convolute expects 9 weights, got {len(self.matrix)}")

    def to_dict(self) -> dict:
        return {"type": self.kind, "matrix": list(self.matrix)}


@dataclass(frozen=True)
class Vignette:
    """Radial edge darkening (amount < 0) or lightening (amount > 0).

    ``amount`` in [-1, 1], ``feather`` in [0, 1] (softness of the falloff).
    """

    kind: ClassVar[str] = "Vignette"
    amount: float
    feather: float = 0.5

    def to_dict(self) -> dict:
        return {"type": self.kind, **asdict(self)}


def sharpen_kernel(sharpen: float) -> Convolute:
    """Sharpen kernel for a slider value in [0, 100]."""
    a = sharpen / 50.0
    return Convolute((0.0, -a, 0.0, -a, 1.0 + 4.0 * a, -a, 0.0, -a, 0.0))


def clarity_kernel(clarity: float) -> Convolute:
    """Clarity kernel for a slider value in [0, 100]."""
    c = clarity / 100.0
    h = c * 0.5
    return Convolute((-h, -c, -h, -c, 1.0 + 6.0 * c, -c, -h, -c, -h))


def build_filter_list(finish: FinishValues) -> list[RasterFilter]:
    """Build the ordered finishing filter list.

    Order: hue, saturation, lightness, sharpen, clarity, vignette. Neutral
    parameters emit no filter.

    :param finish: Finishing parameters (clamped before use)
    :returns: List of filter descriptions, empty when all are neutral
    """
    v = finish.clamp()
    filters: list[RasterFilter] = []

    if v.hue != 0.0:
        filters.append(HueRotation(rotation=v.hue / 360.0))
    if v.saturation != 0.0:
        filters.append(Saturation(saturation=v.saturation / 100.0))
    if v.lightness != 0.0:
        filters.append(Brightness(brightness=v.lightness / 200.0))
    if v.sharpen > 0.0:
        filters.append(sharpen_kernel(v.sharpen))
    if v.clarity > 0.0:
        filters.append(clarity_kernel(v.clarity))
    if v.vignette_amount != 0.0:
        filters.append(
            Vignette(amount=v.vignette_amount / 100.0, feather=v.vignette_feather / 100.0)
        )

    return filters


# ============================================================================
# Reference backend
# ============================================================================


def _hue_rotation_matrix(rotation: float) -> np.ndarray:
    """RGB rotation around the gray axis (Rodrigues' formula around (1,1,1)).

    :param rotation: Rotation as a fraction of pi radians
    :returns: 3x3 matrix applied as ``rgb @ M.T``
    """
    angle = rotation * np.pi
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    third = (1.0 - cos_a) / 3.0
    s = sin_a / np.sqrt(3.0)

    return np.array(
        [
            [cos_a + third, third - s, third + s],
            [third + s, cos_a + third, third - s],
            [third - s, third + s, cos_a + third],
        ],
        dtype=np.float32,
    )


def _smoothstep(edge0: float, edge1: float, x: np.ndarray) -> np.ndarray:
    t = np.clip((x - edge0) / max(edge1 - edge0, 1e-6), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


class ReferenceFilterBackend:
    """CPU implementation of the delegated filters.

    Color filters operate on float32 RGB in [0, 255]; convolutions go
    through Pillow's ``ImageFilter.Kernel``. Alpha is preserved.
    """

    def apply_filters(self, buffer: PixelBuffer, filters: list[RasterFilter]) -> PixelBuffer:
        """Return a new buffer with ``filters`` applied in order.

        :param buffer: Decoded raster (not modified)
        :param filters: Filter descriptions from :func:`build_filter_list`
        :returns: New PixelBuffer
        :raises ValueError: For filter kinds this backend does not know
        """
        out = buffer.copy()
        for flt in filters:
            handler = getattr(self, f"_apply_{flt.kind.lower()}", None)
            if handler is None:
                raise ValueError(f"Unsupported filter kind: {flt.kind}")
            handler(out, flt)
        logger.debug("[ReferenceFilterBackend] Applied %d filters to %s", len(filters), out)
        return out

    @staticmethod
    def _store(buffer: PixelBuffer, rgb: np.ndarray) -> None:
        buffer.data[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)

    def _apply_huerotation(self, buffer: PixelBuffer, flt: HueRotation) -> None:
        matrix = _hue_rotation_matrix(flt.rotation)
        rgb = buffer.rgb.astype(np.float32) @ matrix.T
        self._store(buffer, rgb)

    def _apply_saturation(self, buffer: PixelBuffer, flt: Saturation) -> None:
        rgb = buffer.rgb.astype(np.float32)
        max_rgb = rgb.max(axis=-1, keepdims=True)
        # Pull each channel towards (or push away from) the pixel maximum
        rgb = rgb + (max_rgb - rgb) * (-flt.saturation)
        self._store(buffer, rgb)

    def _apply_brightness(self, buffer: PixelBuffer, flt: Brightness) -> None:
        rgb = buffer.rgb.astype(np.float32) + flt.brightness * 255.0
        self._store(buffer, rgb)

    def _apply_convolute(self, buffer: PixelBuffer, flt: Convolute) -> None:
        if buffer.width < 3 or buffer.height < 3:
            return
        image = Image.fromarray(np.ascontiguousarray(buffer.rgb))
        kernel = ImageFilter.Kernel((3, 3), [float(w) for w in flt.matrix], scale=1)
        buffer.data[..., :3] = np.asarray(image.filter(kernel), dtype=np.uint8)

    def _apply_vignette(self, buffer: PixelBuffer, flt: Vignette) -> None:
        h, w = buffer.height, buffer.width
        yy, xx = np.mgrid[0:h, 0:w].astype(np.float32)
        cx = (w - 1) / 2.0
        cy = (h - 1) / 2.0
        # 0 at the center, 1 at the corners
        dist = np.sqrt(((xx - cx) / max(cx, 1.0)) ** 2 + ((yy - cy) / max(cy, 1.0)) ** 2)
        dist /= np.sqrt(2.0)

        inner = 0.75 * (1.0 - flt.feather)
        mask = _smoothstep(inner, 1.0, dist)[..., None] * abs(flt.amount)

        rgb = buffer.rgb.astype(np.float32)
        if flt.amount < 0:
            rgb = rgb * (1.0 - mask)
        else:
            rgb = rgb + (255.0 - rgb) * mask
        self._store(buffer, rgb)
