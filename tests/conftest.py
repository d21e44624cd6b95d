import pytest

from create_test_image import create_flower_image, encode_image
from petal_counter.core.config import ProcessingConfig
from petal_counter.processing.pipeline import AnalysisPipeline
from petal_counter.processing.upload import UploadedFile


@pytest.fixture
def flower_png() -> bytes:
    return encode_image(create_flower_image(120, petals=8), ".png")


@pytest.fixture
def fast_pipeline() -> AnalysisPipeline:
    """Pipeline with no artificial delay and a fixed random draw."""
    return AnalysisPipeline(ProcessingConfig(delay_ms=0), rng=lambda: 0.5)


@pytest.fixture
def make_upload():
    def _make(data: bytes = b"", content_type: str = "image/png", filename: str = "flower.png"):
        return UploadedFile(filename=filename, content_type=content_type, data=data)

    return _make
