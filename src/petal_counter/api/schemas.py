"""Pydantic schemas for API request/response models."""

from enum import Enum
from pydantic import BaseModel, Field


class FlowerType(str, Enum):
    """Coarse flower type guessed from the petal count."""

    TULIP_OR_LILY = "Tulip or Lily"
    ROSE_OR_APPLE_BLOSSOM = "Rose or Apple Blossom"
    DAISY_OR_SUNFLOWER = "Daisy or Sunflower"
    CHRYSANTHEMUM_OR_DAHLIA = "Chrysanthemum or Dahlia"
    UNKNOWN = "Unknown"


class DragEvent(str, Enum):
    """Drag-and-drop events reported by the upload area."""

    DRAGENTER = "dragenter"
    DRAGOVER = "dragover"
    DRAGLEAVE = "dragleave"
    DROP = "drop"


class ResultDisplay(BaseModel):
    """Pre-formatted strings for the result panel."""

    confidence_text: str = Field(description='e.g. "91.3% Confidence"')
    processing_time_text: str = Field(description='e.g. "2.5s"')
    note: str


class PetalResult(BaseModel):
    """Petal estimate for one image."""

    petal_count: int = Field(ge=3, le=50)
    confidence: float = Field(ge=85.0, lt=95.0, description="Confidence in percent")
    processing_time_ms: int = Field(ge=0)
    flower_type: FlowerType
    display: ResultDisplay


class PixelStatisticsInfo(BaseModel):
    """Counts the estimate was derived from."""

    bright_pixels: int
    color_variation: int
    total_pixels: float = Field(description="Quarter of width x height")
    bright_ratio: float
    edge_ratio: float


class ImageInfo(BaseModel):
    """Decoded image information."""

    width: int
    height: int
    data_url: str | None = None


class AnalysisResponse(BaseModel):
    """Complete analysis response."""

    success: bool
    result: PetalResult
    statistics: PixelStatisticsInfo
    image: ImageInfo


class UploadedImageInfo(BaseModel):
    """The image currently held by the session."""

    filename: str
    content_type: str
    data_url: str


class SessionResponse(BaseModel):
    """Current session state."""

    uploaded_image: UploadedImageInfo | None = None
    result: PetalResult | None = None
    error: str | None = None
    is_analyzing: bool
    drag_active: bool


class DragEventRequest(BaseModel):
    """A drag event from the upload area."""

    event: DragEvent


class ErrorDetail(BaseModel):
    """Error response detail."""

    code: str
    message: str
    details: dict = Field(default_factory=dict)
    suggestions: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = False
    error: ErrorDetail
