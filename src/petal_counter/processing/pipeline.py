"""Main processing pipeline orchestration."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
import math
import random
import time

from petal_counter.core.config import ProcessingConfig
from .classification import FlowerType, classify_flower
from .decoding import decode_rgba
from .petals import PetalEstimator, PixelStatistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis result."""

    petal_count: int
    confidence: float
    processing_time_ms: int
    flower_type: FlowerType
    statistics: PixelStatistics
    width: int
    height: int


class AnalysisPipeline:
    """Orchestrates decoding, the simulated processing delay and estimation."""

    def __init__(
        self,
        config: ProcessingConfig | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ):
        self.config = config or ProcessingConfig()
        self.estimator = PetalEstimator(self.config)
        self.clock = clock
        self.sleep = sleep
        self.rng = rng

    def draw_confidence(self) -> float:
        """Pseudo-random confidence in [floor, cap)."""
        # floor + r * spread can round up to the cap itself for r just below 1
        ceiling = math.nextafter(self.config.confidence_cap, self.config.confidence_floor)
        return min(
            self.config.confidence_floor + self.rng() * self.config.confidence_spread,
            ceiling,
        )

    async def analyze(self, data: bytes) -> AnalysisResult:
        """
        Run the complete analysis on encoded image bytes.

        The result is delivered no earlier than ``config.delay_ms`` after the
        call started.

        Args:
            data: Encoded image bytes (already validated)

        Returns:
            AnalysisResult with petal count, confidence and flower type

        Raises:
            AnalysisFailureError: If the image cannot be decoded
        """
        start_time = self.clock()

        # Step 1: Decode to RGBA
        pixels = decode_rgba(data)
        height, width = pixels.shape[:2]

        # Step 2: Simulated processing time
        await self.sleep(self.config.delay_ms / 1000)

        # Step 3: Estimate and classify
        petal_count, statistics = self.estimator.estimate(pixels)
        flower_type = classify_flower(petal_count)
        confidence = self.draw_confidence()

        processing_time_ms = max(0, int((self.clock() - start_time) * 1000))

        logger.info(
            f"Analyzed {width}x{height} image: {petal_count} petals "
            f"({flower_type.value}), {confidence:.1f}% in {processing_time_ms}ms"
        )

        return AnalysisResult(
            petal_count=petal_count,
            confidence=confidence,
            processing_time_ms=processing_time_ms,
            flower_type=flower_type,
            statistics=statistics,
            width=width,
            height=height,
        )
