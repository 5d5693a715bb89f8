"""
Renderer module - the image loop around the path integrator.

Implements:
- Anti-aliased sampling (jittered samples averaged per pixel)
- Multi-threaded tile-based rendering with one random stream per tile
- Gamma encoding and 8-bit output (PNG etc. via Pillow, plain PPM)
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np
from PIL import Image

from .camera import Camera
from .environment import Background
from .integrator import integrate, MAX_DEPTH
from .shapes import Hittable

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = MAX_DEPTH
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    gamma: float = 2.0
    background: Optional[Background] = None

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


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
            callback: Function that takes progress as float (0.0 to 1.0).
                Calls never overlap and the values strictly increase, even
                when tiles finish on several threads.
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear image.

        Tile k always draws from the k-th child of ``SeedSequence(seed)``,
        so a seeded render gives the same image whatever the thread count.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear (not gamma-encoded) image of shape (height, width, 3)
        """
        s = self.settings
        image = np.zeros((s.height, s.width, 3), dtype=np.float64)

        tiles = self._generate_tiles(s.width, s.height)
        children = np.random.SeedSequence(s.seed).spawn(len(tiles))
        total_tiles = len(tiles)
        completed = 0
        lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d tiles on %d threads",
            s.width, s.height, s.samples_per_pixel, s.max_depth, total_tiles, s.num_threads
        )
        start = time.perf_counter()

        def render_tile(job: Tuple[Tile, np.random.SeedSequence]) -> None:
            nonlocal completed
            tile, seed_seq = job
            rng = np.random.default_rng(seed_seq)
            x0, y0, x1, y1 = tile

            # Tiles cover disjoint pixel ranges, so writes need no lock
            for j in range(y0, y1):
                for i in range(x0, x1):
                    image[j, i] = self._sample_pixel(scene, camera, i, j, rng)

            # Reported under the lock so callbacks see progress in order
            with lock:
                completed += 1
                logger.debug("Tile %s finished (%d/%d)", tile, completed, total_tiles)
                if self._progress_callback:
                    self._progress_callback(completed / total_tiles)

        jobs = list(zip(tiles, children))
        if s.num_threads > 1:
            with ThreadPoolExecutor(max_workers=s.num_threads) as executor:
                list(executor.map(render_tile, jobs))
        else:
            for job in jobs:
                render_tile(job)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image

    def _sample_pixel(
        self,
        scene: Hittable,
        camera: Camera,
        i: int,
        j: int,
        rng: np.random.Generator
    ) -> np.ndarray:
        """Average ``samples_per_pixel`` jittered samples for pixel (i, j)."""
        s = self.settings
        total = np.zeros(3, dtype=np.float64)

        for _ in range(s.samples_per_pixel):
            u = (i + rng.random()) / (s.width - 1)
            v = (s.height - 1 - j + rng.random()) / (s.height - 1)
            ray = camera.get_ray(u, v, rng)
            total += integrate(ray, scene, s.max_depth, s.background, rng).to_array()

        return total / s.samples_per_pixel

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Split the image into (x0, y0, x1, y1) tiles, row by row."""
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                tiles.append((x, y, min(x + tile_size, width), min(y + tile_size, height)))

        return tiles

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Gamma-encode and quantize a linear image to 8 bits.

        Args:
            hdr_image: Linear image array (float)

        Returns:
            Image as uint8 array
        """
        corrected = np.power(np.clip(hdr_image, 0.0, None), 1.0 / self.settings.gamma)
        return (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save an image; ``.ppm`` is written as plain-text P3.

        Args:
            image: Linear float image or an already-encoded uint8 image
            filename: Output filename (extension determines format)
        """
        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        path = Path(filename)
        if path.suffix.lower() == '.ppm':
            write_ppm(image, path)
        else:
            Image.fromarray(image, 'RGB').save(path)
        logger.info("Saved %s", path)


def write_ppm(image: np.ndarray, path: Path) -> None:
    """Write a uint8 RGB image as an ASCII (P3) PPM file."""
    height, width = image.shape[:2]
    with open(path, 'w', encoding='ascii') as f:
        f.write(f"P3\n{width} {height}\n255\n")
        for row in image:
            for r, g, b in row:
                f.write(f"{r} {g} {b}\n")
