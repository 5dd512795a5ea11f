"""
Protocol definitions for pixgrade interfaces.

Defines the two halves of the grading pipeline (pure buffer stages and
backend-delegated raster filters) and the host-side collaborators the engine
talks to: source images, raster backends and filter backends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from pixgrade.buffer import PixelBuffer
    from pixgrade.config.values import GradingState
    from pixgrade.handoff import Transform


@runtime_checkable
class PixelStage(Protocol):
    """
    Protocol for buffer stages (Curves, Levels, Temperature/Tint, Balance).

    A stage is a pure function of a buffer and the grading state, runnable
    without any rendering backend.
    """

    name: str

    def is_neutral(self, state: GradingState) -> bool:
        """Check if the stage would leave the buffer unchanged (skip it)."""
        ...

    def apply(self, buffer: PixelBuffer, state: GradingState) -> PixelBuffer:
        """
        Apply the stage to the buffer, in-place.

        :param buffer: Working buffer (modified in-place)
        :param state: Current grading parameters
        :returns: The same buffer, for chaining
        """
        ...


@runtime_checkable
class RasterFilter(Protocol):
    """Protocol for backend-delegated filters (opaque to the core)."""

    @property
    def kind(self) -> str:
        """Filter type name understood by the backend."""
        ...

    def to_dict(self) -> dict:
        """Serializable description for the host backend."""
        ...


@runtime_checkable
class SourceImage(Protocol):
    """
    Protocol for host image objects.

    The object itself is the cache identity; it must be weak-referenceable.
    """

    transform: Transform

    @property
    def is_decoded(self) -> bool:
        """True once the underlying decode has completed."""
        ...

    def read_pixels(self) -> np.ndarray | None:
        """Return the decoded RGBA (or RGB) uint8 pixels, or None if unavailable."""
        ...


@runtime_checkable
class RasterBackend(Protocol):
    """Protocol for the encode/decode boundary of the host."""

    @property
    def available(self) -> bool:
        """False when the host cannot provide a drawable surface."""
        ...

    def encode(self, buffer: PixelBuffer) -> bytes:
        """Encode a buffer into a decodable raster payload."""
        ...

    def decode(self, payload: bytes) -> PixelBuffer:
        """Decode a payload produced by ``encode`` (may block; run off-loop)."""
        ...


@runtime_checkable
class FilterBackend(Protocol):
    """Protocol for applying delegated filters to a decoded raster."""

    def apply_filters(self, buffer: PixelBuffer, filters: list[RasterFilter]) -> PixelBuffer:
        """Return a new buffer with the filters applied in order."""
        ...
