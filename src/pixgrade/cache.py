"""Original buffer cache.

Keeps the decoded source pixels of each host image, keyed by the image
object's identity through a ``weakref.WeakKeyDictionary``: an entry becomes
collectable as soon as the host drops the image. Stored entries are
read-only and every read hands out an independent copy.

Example:
    >>> cache = OriginalBufferCache()
    >>> original = cache.get(image)   # None until the image is decoded
    >>> if original is not None:
    ...     original.data[...] = 0       # does not affect the cache
"""

from __future__ import annotations

import logging
import weakref

import numpy as np

from pixgrade.buffer import PixelBuffer
from pixgrade.protocols import SourceImage

logger = logging.getLogger(__name__)


class OriginalBufferCache:
    """Identity-keyed, copy-on-read store of original pixels."""

    def __init__(self):
        self._entries: weakref.WeakKeyDictionary[SourceImage, PixelBuffer] = (
            weakref.WeakKeyDictionary()
        )

    def __contains__(self, image: object) -> bool:
        try:
            return image in self._entries
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, image: SourceImage) -> PixelBuffer | None:
        """Return a fresh copy of the original pixels of ``image``.

        On first access the image must be fully decoded; otherwise None is
        returned and nothing is cached (callers treat it as a no-op).

        :param image: Host image object (weak-referenceable)
        :returns: Writable copy of the original, or None if not ready
        """
        cached = self._entries.get(image)
        if cached is not None:
            return cached.copy()

        original = self._capture(image)
        if original is None:
            return None

        self._entries[image] = original
        logger.debug("[OriginalBufferCache] Cached %s (%d entries)", original, len(self._entries))
        return original.copy()

    def prime(self, image: SourceImage) -> bool:
        """Capture the original of ``image`` without handing out a copy.

        :param image: Host image object (weak-referenceable)
        :returns: True if an entry is cached after the call
        """
        if image in self._entries:
            return True

        original = self._capture(image)
        if original is None:
            return False

        self._entries[image] = original
        logger.debug("[OriginalBufferCache] Primed %s (%d entries)", original, len(self._entries))
        return True

    def peek(self, image: SourceImage) -> PixelBuffer | None:
        """Return the stored read-only entry without capturing or copying."""
        return self._entries.get(image)

    def discard(self, image: SourceImage) -> None:
        """Drop the entry of ``image`` (e.g. after the host replaced its source)."""
        self._entries.pop(image, None)

    def clear(self) -> None:
        self._entries.clear()

    @staticmethod
    def _capture(image: SourceImage) -> PixelBuffer | None:
        if not image.is_decoded:
            logger.debug("[OriginalBufferCache] Source not decoded yet, skipping")
            return None

        pixels = image.read_pixels()
        if pixels is None:
            logger.debug("[OriginalBufferCache] Source returned no pixels, skipping")
            return None

        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            logger.debug("[OriginalBufferCache] Empty source %s, skipping", pixels.shape)
            return None

        return PixelBuffer.from_array(pixels).freeze()
