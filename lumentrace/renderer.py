"""
Renderer module - drives the camera over every pixel.

Implements:
- Multi-threaded (or multi-process) row-based rendering
- Reproducible sampling from an optional seed
- Gamma correction and 8-bit quantization
- ASCII PPM output, other formats through Pillow
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor
from dataclasses import dataclass
from itertools import repeat
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO, TYPE_CHECKING
import logging
import os
import time
import numpy as np

if TYPE_CHECKING:
    from .camera import Camera
    from .shapes import Hittable

logger = logging.getLogger(__name__)

BACKENDS = ('thread', 'process')


@dataclass
class RenderSettings:
    """Execution options for the renderer.

    Attributes:
        num_threads: Worker count, 0 picks the CPU count, 1 renders inline
        backend: 'thread' or 'process' worker pool
        seed: Seed for reproducible renders, None draws fresh entropy
    """
    num_threads: int = 0  # 0 = auto-detect
    backend: str = 'thread'
    seed: Optional[int] = None

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown render backend: {self.backend!r} (expected one of {BACKENDS})")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"Render seed must not be negative, got {self.seed}")
        if self.num_threads <= 0:
            self.num_threads = os.cpu_count() or 4


def row_rng(seed: Optional[int], row: int) -> np.random.Generator:
    """Random generator for one image row.

    Each row gets an independent stream derived from ``seed``, so the image
    does not depend on how rows are spread across workers.
    """
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(row,)))


def render_row(camera: Camera, world: Hittable, row: int, seed: Optional[int] = None) -> np.ndarray:
    """Render one row of linear (not gamma corrected) pixel colors.

    Returns:
        Array of shape (image_width, 3)
    """
    rng = row_rng(seed, row)
    pixels = np.empty((camera.image_width, 3), dtype=np.float64)
    for i in range(camera.image_width):
        pixels[i] = camera.pixel_color(i, row, world, rng).to_array()
    return pixels


# Scene shared by the rows rendered in one worker process
_worker_scene: Optional[tuple] = None


def _init_worker(camera: Camera, world: Hittable) -> None:
    global _worker_scene
    _worker_scene = (camera, world)


def _render_row_in_worker(row: int, seed: Optional[int]) -> np.ndarray:
    camera, world = _worker_scene
    return render_row(camera, world, row, seed)


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear image as numpy array of shape (height, width, 3),
            rows top to bottom
        """
        height = camera.image_height
        image = np.zeros((height, camera.image_width, 3), dtype=np.float64)
        seed = self.settings.seed

        logger.info(
            "Rendering %dx%d, %d samples, depth %d, %d %s worker(s)",
            camera.image_width, height, camera.samples_per_pixel, camera.max_depth,
            self.settings.num_threads, self.settings.backend,
        )
        start = time.perf_counter()

        for row, pixels in enumerate(self._map_rows(world, camera, seed)):
            image[row] = pixels
            if self._progress_callback:
                self._progress_callback((row + 1) / height)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image

    def _map_rows(self, world: Hittable, camera: Camera, seed: Optional[int]) -> Iterator[np.ndarray]:
        """Yield rendered rows in raster order, whatever order workers finish in."""
        rows = range(camera.image_height)
        workers = min(self.settings.num_threads, camera.image_height)

        if workers <= 1:
            for row in rows:
                yield render_row(camera, world, row, seed)
            return

        if self.settings.backend == 'process':
            with ProcessPoolExecutor(
                max_workers=workers, initializer=_init_worker, initargs=(camera, world)
            ) as executor:
                yield from executor.map(_render_row_in_worker, rows, repeat(seed))
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                yield from executor.map(
                    lambda row: render_row(camera, world, row, seed), rows
                )


def to_ldr(image: np.ndarray) -> np.ndarray:
    """Convert a linear image to 8-bit with gamma 2 correction.

    Each channel becomes ``int(255.999 * sqrt(x))``, non-positive values map
    to 0 and the result is clamped to [0, 255].

    Args:
        image: Linear image array (float)

    Returns:
        LDR image as uint8 array
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    corrected = np.sqrt(np.clip(linear, 0.0, None))
    return np.clip(255.999 * corrected, 0, 255).astype(np.uint8)


def encode_pixels(ldr: np.ndarray) -> Iterator[str]:
    """Yield ``"R G B"`` for each pixel, rows top to bottom, left to right."""
    for row in ldr:
        for r, g, b in row:
            yield f"{r} {g} {b}"


def write_ppm(stream: TextIO, image: np.ndarray) -> None:
    """Write an image to a text stream as ASCII PPM (P3).

    Args:
        stream: Writable text stream
        image: Image array of shape (height, width, 3), float images are
            converted with ``to_ldr``
    """
    if image.dtype != np.uint8:
        image = to_ldr(image)
    height, width = image.shape[:2]
    stream.write(f"P3\n{width} {height}\n255\n")
    for pixel in encode_pixels(image):
        stream.write(pixel + "\n")


def save_image(image: np.ndarray, filename) -> None:
    """Save image to file.

    Args:
        image: Image array (linear float or uint8)
        filename: Output filename (extension determines format)

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(filename)
    if image.dtype != np.uint8:
        image = to_ldr(image)

    if path.suffix.lower() == '.ppm':
        with open(path, 'w', encoding='ascii', newline='\n') as f:
            write_ppm(f, image)
    else:
        from PIL import Image as PILImage

        PILImage.fromarray(image, 'RGB').save(path)

    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], path)
