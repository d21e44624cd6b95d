"""Application configuration."""

from dataclasses import dataclass
import os


@dataclass
class ProcessingConfig:
    """Configuration for the petal heuristic."""

    # Artificial delay before a result is delivered
    delay_ms: int = 2500

    # Analysis disk radius as a fraction of half the shorter side
    disk_fraction: float = 0.8

    brightness_threshold: float = 150.0
    color_diff_threshold: int = 50

    # estimate = base + bright_ratio * bright_weight + edge_ratio * edge_weight
    base_petals: float = 8.0
    bright_weight: float = 15.0
    edge_weight: float = 20.0

    min_petals: int = 3
    max_petals: int = 50

    # confidence = min(confidence_floor + random() * confidence_spread, confidence_cap)
    confidence_floor: float = 85.0
    confidence_spread: float = 10.0
    confidence_cap: float = 95.0


MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}

INVALID_FILE_TYPE_MESSAGE = "Please upload a valid image file (JPG, PNG, or WebP)"
FILE_TOO_LARGE_MESSAGE = "File size must be less than 10MB"
ANALYSIS_FAILED_MESSAGE = "Failed to analyze image. Please try again."
ANALYSIS_IN_PROGRESS_MESSAGE = "An analysis is already running"

RESULT_NOTE = (
    "This tool uses computer vision algorithms to estimate petal count. "
    "Accuracy may vary based on image quality, lighting, and flower type. "
    "For best results, use clear, well-lit images with the flower centered in the frame."
)

# Logging Configuration
LOG_LEVEL = os.environ.get("PETAL_COUNTER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
