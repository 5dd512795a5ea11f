"""Post-pipeline filter handoff.

Packages a graded buffer for the host: encode it into a decodable raster,
wait for the asynchronous decode, attach the finishing filter list and copy
the source's transform verbatim. The decode is the only suspension point of
a recompute.

Example:
    >>> handoff = FilterHandoff(PillowBackend())
    >>> result = await handoff.render(graded, image, state.finish, generation=3)
    >>> result.filters  # replaces any previous filter list
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from io import BytesIO

import numpy as np
from PIL import Image

from pixgrade.buffer import PixelBuffer
from pixgrade.config.values import FinishValues
from pixgrade.filters import build_filter_list
from pixgrade.protocols import RasterBackend, RasterFilter, SourceImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transform:
    """Host-managed placement of an image object.

    Copied verbatim from the pre-edit object onto the new one.
    """

    left: float = 0.0
    top: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    angle: float = 0.0
    flip_x: bool = False
    flip_y: bool = False
    opacity: float = 1.0

    def copy(self) -> Transform:
        return replace(self)


@dataclass
class RenderedResult:
    """A new decoded raster plus its finishing filters.

    Attributes:
        raster: Decoded pixels of the graded image
        filters: Finishing filters for the host backend (full replacement)
        transform: Transform copied from the source object
        generation: Recompute generation that produced this result
    """

    raster: PixelBuffer
    filters: list[RasterFilter] = field(default_factory=list)
    transform: Transform = field(default_factory=Transform)
    generation: int = 0


class PillowBackend:
    """Raster backend encoding to PNG and decoding with Pillow."""

    format = "PNG"

    @property
    def available(self) -> bool:
        return True

    def encode(self, buffer: PixelBuffer) -> bytes:
        image = Image.fromarray(buffer.data)
        stream = BytesIO()
        image.save(stream, format=self.format)
        return stream.getvalue()

    def decode(self, payload: bytes) -> PixelBuffer:
        with Image.open(BytesIO(payload)) as image:
            image.load()
            rgba = image.convert("RGBA")
        return PixelBuffer(np.asarray(rgba, dtype=np.uint8).copy())


class FilterHandoff:
    """Turns a graded buffer into a :class:`RenderedResult`.

    :param backend: Raster backend performing encode/decode
    """

    def __init__(self, backend: RasterBackend):
        self.backend = backend

    async def render(
        self,
        buffer: PixelBuffer,
        source: SourceImage,
        finish: FinishValues,
        generation: int = 0,
    ) -> RenderedResult | None:
        """Encode, decode and package a graded buffer.

        The transform is captured before the decode is awaited so the result
        reflects the object as it was when the recompute ran.

        :param buffer: Graded working buffer
        :param source: Host image whose transform is copied
        :param finish: Finishing parameters for the filter list
        :param generation: Recompute generation stamped on the result
        :returns: RenderedResult, or None if the backend is unavailable
        """
        if not self.backend.available:
            logger.debug("[FilterHandoff] Raster backend unavailable, skipping")
            return None

        transform = source.transform.copy()
        filters = build_filter_list(finish)
        payload = self.backend.encode(buffer)

        loop = asyncio.get_running_loop()
        raster = await loop.run_in_executor(None, self.backend.decode, payload)

        logger.debug(
            "[FilterHandoff] Generation %d decoded %s with %d filters",
            generation,
            raster,
            len(filters),
        )
        return RenderedResult(
            raster=raster, filters=filters, transform=transform, generation=generation
        )
