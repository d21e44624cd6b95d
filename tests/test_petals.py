import math
import tracemalloc

import numpy as np
import pytest

from create_test_image import to_rgba
from petal_counter.core.config import ProcessingConfig
from petal_counter.core.exceptions import AnalysisFailureError
from petal_counter.processing.petals import PetalEstimator, round_half_up


def reference_counts(pixels: np.ndarray, disk_fraction: float = 0.8) -> tuple[int, int]:
    """Straight pixel-by-pixel scan over the flat RGBA byte buffer."""
    height, width = pixels.shape[:2]
    data = pixels.reshape(-1).astype(int)
    center_x, center_y = width / 2, height / 2
    max_distance = min(width, height) / 2
    bright = variation = 0

    for i in range(0, len(data), 4):
        index = i // 4
        x, y = index % width, index // width
        r, g, b = data[i], data[i + 1], data[i + 2]
        if math.sqrt((x - center_x) ** 2 + (y - center_y) ** 2) < max_distance * disk_fraction:
            if (r + g + b) / 3 > 150:
                bright += 1
            if i > width * 4:
                above = i - width * 4
                diff = abs(r - data[above]) + abs(g - data[above + 1]) + abs(b - data[above + 2])
                if diff > 50:
                    variation += 1

    return bright, variation


def uniform(height, width, value):
    return to_rgba(np.full((height, width, 3), value, dtype=np.uint8))


def alternating_rows(height, width):
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[::2] = 255
    return to_rgba(rgb)


@pytest.fixture
def estimator():
    return PetalEstimator()


def test_black_image_gives_eight(estimator):
    petals, stats = estimator.estimate(uniform(40, 60, 0))

    assert stats.bright_pixels == 0
    assert stats.color_variation == 0
    assert petals == 8


def test_total_pixels_is_quarter_of_area(estimator):
    stats = estimator.collect_statistics(uniform(10, 20, 0))

    assert stats.total_pixels == 50.0


def test_white_image_counts_only_disk(estimator):
    pixels = uniform(30, 30, 255)
    stats = estimator.collect_statistics(pixels)

    expected_bright, _ = reference_counts(pixels)
    assert stats.bright_pixels == expected_bright
    assert 0 < stats.bright_pixels < 30 * 30
    assert stats.color_variation == 0


def test_brightness_threshold_is_strict(estimator):
    # (150 + 150 + 150) / 3 == 150 is not bright
    at_threshold = estimator.collect_statistics(uniform(20, 20, 150))
    above = estimator.collect_statistics(
        to_rgba(np.full((20, 20, 3), (150, 150, 151), dtype=np.uint8))
    )

    assert at_threshold.bright_pixels == 0
    assert above.bright_pixels > 0


def test_alternating_rows_count_every_row_boundary(estimator):
    height, width = 24, 24
    pixels = alternating_rows(height, width)
    stats = estimator.collect_statistics(pixels)

    ys, xs = np.indices((height, width))
    in_disk = np.sqrt((xs - width / 2) ** 2 + (ys - height / 2) ** 2) < 0.8 * min(width, height) / 2
    below_first_row = (ys * width + xs) > width

    assert stats.color_variation == int(np.count_nonzero(in_disk & below_first_row))
    assert stats.color_variation == reference_counts(pixels)[1]


def test_alternating_rows_clamp_to_fifty(estimator):
    petals, _ = estimator.estimate(alternating_rows(100, 100))

    assert petals == 50


def test_small_differences_are_not_edges(estimator):
    rgb = np.zeros((20, 20, 3), dtype=np.uint8)
    rgb[::2] = (20, 20, 10)  # summed difference of exactly 50

    stats = estimator.collect_statistics(to_rgba(rgb))

    assert stats.color_variation == 0


@pytest.mark.parametrize("shape", [(1, 1), (1, 7), (7, 1), (2, 2), (3, 5), (31, 17), (64, 48)])
def test_matches_reference_scan_on_noise(estimator, shape):
    rng = np.random.default_rng(sum(shape))
    pixels = to_rgba(rng.integers(0, 256, size=shape + (3,), dtype=np.uint8))

    stats = estimator.collect_statistics(pixels)

    assert (stats.bright_pixels, stats.color_variation) == reference_counts(pixels)


@pytest.mark.parametrize("shape", [(1, 1), (1, 9), (2, 3), (50, 50), (80, 20)])
def test_petal_count_within_bounds(estimator, shape):
    rng = np.random.default_rng(7)
    pixels = to_rgba(rng.integers(0, 256, size=shape + (3,), dtype=np.uint8))

    petals, _ = estimator.estimate(pixels)

    assert isinstance(petals, int)
    assert 3 <= petals <= 50


def test_single_pixel_image_falls_outside_disk(estimator):
    petals, stats = estimator.estimate(uniform(1, 1, 255))

    assert stats.bright_pixels == 0
    assert petals == 8


def test_alpha_channel_is_ignored(estimator):
    pixels = uniform(20, 20, 255)
    transparent = pixels.copy()
    transparent[..., 3] = 0

    assert estimator.collect_statistics(pixels) == estimator.collect_statistics(transparent)


def test_lower_clamp():
    estimator = PetalEstimator(ProcessingConfig(base_petals=0))

    petals, _ = estimator.estimate(uniform(10, 10, 0))

    assert petals == 3


def test_empty_buffer_is_analysis_failure(estimator):
    with pytest.raises(AnalysisFailureError):
        estimator.collect_statistics(np.zeros((0, 5, 4), dtype=np.uint8))


@pytest.mark.parametrize(
    "value,expected",
    [(8.5, 9), (9.5, 10), (8.49, 8), (12.0, 12), (49.5, 50)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_first_pixel_of_second_row_is_not_compared():
    # A wide disk reaches column 0, so pixel (row 1, col 0) takes part
    estimator = PetalEstimator(ProcessingConfig(disk_fraction=2.0))
    rgb = np.zeros((4, 4, 3), dtype=np.uint8)
    rgb[1, 0] = 255
    pixels = to_rgba(rgb)

    stats = estimator.collect_statistics(pixels)

    # Only (row 2, col 0) sees a change against the white pixel above it
    assert stats.bright_pixels == 1
    assert stats.color_variation == 1
    assert (stats.bright_pixels, stats.color_variation) == reference_counts(pixels, 2.0)


@pytest.mark.parametrize("disk_fraction", [0.8, 1.5])
def test_band_boundaries_match_reference_scan(disk_fraction):
    estimator = PetalEstimator(ProcessingConfig(disk_fraction=disk_fraction))
    estimator.band_rows = 3
    rng = np.random.default_rng(11)
    pixels = to_rgba(rng.integers(0, 256, size=(29, 23, 3), dtype=np.uint8))

    stats = estimator.collect_statistics(pixels)

    assert (stats.bright_pixels, stats.color_variation) == reference_counts(pixels, disk_fraction)


def test_scan_memory_stays_bounded(estimator):
    height, width = 3000, 2000
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[::2, :, :3] = 255

    tracemalloc.start()
    try:
        estimator.collect_statistics(pixels)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    assert peak / (height * width) < 16
