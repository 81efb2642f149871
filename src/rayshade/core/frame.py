"""Frame driver rendering scanline batches into an image sink.

This module provides a wrapper around the shading kernel that supports:
- Rendering the frame in batches of scanlines
- Progress callbacks between batches
- Handing every finished pixel to an image sink exactly once

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.core.frame import FrameRenderer
    >>> from rayshade.preview.buffer import ImageBuffer
    >>>
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(callback=lambda done, total: print(f"{done}/{total}"))
    >>> sink = ImageBuffer(320, 240)
    >>> renderer.write_to(sink)
"""

from collections.abc import Callable, Generator
from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from rayshade.core.integrator import (
    get_image_numpy,
    render_rows,
    setup_render_target,
)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class ImageSink(Protocol):
    """Destination of rendered pixels.

    Pixel (0, 0) is the top-left corner. Colors are (R, G, B) with every
    channel in [0, 1].
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def set_pixel(self, x: int, y: int, color: tuple[float, float, float]) -> None: ...


class FrameRenderer:
    """Renders one frame of the uploaded scene.

    The renderer owns the dimensions of the render target and delegates to
    the global integrator buffer (a Taichi field).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the frame renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of scanlines rendered so far."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        """Whether every scanline has been rendered."""
        return self._rows_done >= self._height

    def render_batches(self, rows_per_batch: int = 16) -> Generator[tuple[int, int], None, None]:
        """Render the frame, yielding progress after each batch.

        Args:
            rows_per_batch: Number of scanlines per kernel launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._rows_done = 0
        while self._rows_done < self._height:
            row_end = min(self._rows_done + rows_per_batch, self._height)
            render_rows(self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def render(self, callback: ProgressCallback | None = None, rows_per_batch: int = 16) -> None:
        """Render the whole frame.

        Args:
            callback: Optional callback called after each batch with
                (rows_done, total_rows).
            rows_per_batch: Number of scanlines per kernel launch. Larger
                batches reduce launch overhead but report progress less often.
        """
        for rows_done, total_rows in self.render_batches(rows_per_batch):
            if callback is not None:
                callback(rows_done, total_rows)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image.

        Returns:
            NumPy array of shape (height, width, 3), row 0 at the top,
            values in [0, 1].
        """
        return get_image_numpy()

    def write_to(self, sink: ImageSink) -> None:
        """Hand every pixel of the finished frame to an image sink.

        Each pixel is written exactly once.

        Args:
            sink: Destination with the same dimensions as the frame.

        Raises:
            RuntimeError: If the frame has not been fully rendered.
            ValueError: If the sink dimensions differ from the frame.
        """
        if not self.is_complete:
            raise RuntimeError("Frame is not fully rendered")
        if sink.width != self._width or sink.height != self._height:
            raise ValueError(
                f"Sink size {sink.width}x{sink.height} does not match "
                f"frame size {self._width}x{self._height}"
            )

        image = self.get_image_numpy()
        for y in range(self._height):
            row = image[y]
            for x in range(self._width):
                r, g, b = row[x]
                sink.set_pixel(x, y, (float(r), float(g), float(b)))

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
