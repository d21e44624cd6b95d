"""Petal count estimation from brightness and row-to-row colour changes."""

from dataclasses import dataclass
import logging
import math
import numpy as np

from petal_counter.core.config import ProcessingConfig
from petal_counter.core.exceptions import AnalysisFailureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelStatistics:
    """Counts gathered over the analysis disk."""

    bright_pixels: int
    color_variation: int
    total_pixels: float

    @property
    def bright_ratio(self) -> float:
        return self.bright_pixels / self.total_pixels

    @property
    def edge_ratio(self) -> float:
        return self.color_variation / self.total_pixels


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity, unlike the built-in round()."""
    return math.floor(value + 0.5)


class PetalEstimator:
    """Estimates petal count from an RGBA pixel buffer."""

    # Rows scanned per pass; bounds the temporary arrays to a band of the image
    band_rows = 256

    def __init__(self, config: ProcessingConfig | None = None):
        self.config = config or ProcessingConfig()

    def collect_statistics(self, pixels: np.ndarray) -> PixelStatistics:
        """
        Scan the central disk of the image.

        Args:
            pixels: (height, width, 4) RGBA array; only R, G and B are read

        Returns:
            PixelStatistics with bright and colour-variation counts

        Raises:
            AnalysisFailureError: If the buffer is empty or not RGB(A)
        """
        if pixels.ndim != 3 or pixels.shape[2] < 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise AnalysisFailureError(details={"shape": list(pixels.shape)})

        height, width = pixels.shape[:2]
        center_x = width / 2
        center_y = height / 2
        radius = min(width, height) / 2 * self.config.disk_fraction

        dx2 = (np.arange(width, dtype=np.float64) - center_x) ** 2

        # Rows farther than the radius from the centre cannot reach the disk
        first_row = max(0, math.floor(center_y - radius))
        last_row = min(height, math.ceil(center_y + radius) + 1)

        bright_pixels = 0
        color_variation = 0

        for start in range(first_row, last_row, self.band_rows):
            stop = min(start + self.band_rows, last_row)

            dy2 = (np.arange(start, stop, dtype=np.float64) - center_y) ** 2
            in_disk = np.sqrt(dy2[:, None] + dx2[None, :]) < radius

            rgb = pixels[start:stop, :, :3].astype(np.int16)
            brightness = rgb.sum(axis=-1, dtype=np.int16) / 3
            bright_pixels += int(
                np.count_nonzero(in_disk & (brightness > self.config.brightness_threshold))
            )

            # Summed |dR|+|dG|+|dB| against the pixel one row above. Only flat
            # pixel indices strictly greater than the width are compared, which
            # also leaves out the first pixel of the second row.
            lo = max(start, 1)
            if lo >= stop:
                continue
            above = pixels[lo - 1 : stop - 1, :, :3].astype(np.int16)
            color_diff = np.abs(rgb[lo - start :] - above).sum(axis=-1, dtype=np.int16)
            is_edge = in_disk[lo - start :] & (color_diff > self.config.color_diff_threshold)
            if lo == 1:
                is_edge[0, 0] = False
            color_variation += int(np.count_nonzero(is_edge))

        # A quarter of the real pixel count
        total_pixels = (width * height) / 4

        return PixelStatistics(
            bright_pixels=bright_pixels,
            color_variation=color_variation,
            total_pixels=total_pixels,
        )

    def estimate(self, pixels: np.ndarray) -> tuple[int, PixelStatistics]:
        """
        Estimate the petal count of a flower image.

        Returns:
            Tuple of (clamped petal count, statistics it was derived from)
        """
        stats = self.collect_statistics(pixels)
        raw = (
            self.config.base_petals
            + stats.bright_ratio * self.config.bright_weight
            + stats.edge_ratio * self.config.edge_weight
        )
        petals = max(self.config.min_petals, min(round_half_up(raw), self.config.max_petals))

        logger.debug(
            f"bright={stats.bright_pixels} variation={stats.color_variation} "
            f"total={stats.total_pixels} raw={raw:.3f} petals={petals}"
        )
        return petals, stats
