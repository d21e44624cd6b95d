"""API endpoint definitions."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from petal_counter.core.config import MAX_FILE_SIZE, RESULT_NOTE
from petal_counter.core.exceptions import (
    AnalysisInProgressError,
    PetalAnalysisError,
)
from petal_counter.processing.pipeline import AnalysisPipeline, AnalysisResult
from petal_counter.processing.session import AnalysisSession, SessionSnapshot
from petal_counter.processing.upload import UploadedFile, to_data_url, validate_upload
from .schemas import (
    AnalysisResponse,
    DragEvent,
    DragEventRequest,
    ErrorDetail,
    ErrorResponse,
    FlowerType,
    ImageInfo,
    PetalResult,
    PixelStatisticsInfo,
    ResultDisplay,
    SessionResponse,
    UploadedImageInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    409: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    415: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def get_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline()


def get_session(request: Request) -> AnalysisSession:
    return request.app.state.session


async def read_upload(file: UploadFile) -> UploadedFile:
    """
    Read an uploaded file in chunks.

    Reading stops one byte past MAX_FILE_SIZE, which is enough for
    validate_upload to reject the file without buffering all of it.
    """
    chunks = []
    total_size = 0

    while chunk := await file.read(1024 * 1024):  # 1MB chunks
        chunks.append(chunk)
        total_size += len(chunk)
        if total_size > MAX_FILE_SIZE:
            break

    return UploadedFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "",
        data=b"".join(chunks)[: MAX_FILE_SIZE + 1],
    )


def build_result(result: AnalysisResult) -> PetalResult:
    return PetalResult(
        petal_count=result.petal_count,
        confidence=result.confidence,
        processing_time_ms=result.processing_time_ms,
        flower_type=FlowerType(result.flower_type.value),
        display=ResultDisplay(
            confidence_text=f"{result.confidence:.1f}% Confidence",
            processing_time_text=f"{result.processing_time_ms / 1000:.1f}s",
            note=RESULT_NOTE,
        ),
    )


def build_session_response(snapshot: SessionSnapshot) -> SessionResponse:
    image = snapshot.uploaded_image
    return SessionResponse(
        uploaded_image=(
            UploadedImageInfo(
                filename=image.filename,
                content_type=image.content_type,
                data_url=image.data_url,
            )
            if image
            else None
        ),
        result=build_result(snapshot.result) if snapshot.result else None,
        error=snapshot.error,
        is_analyzing=snapshot.is_analyzing,
        drag_active=snapshot.drag_active,
    )


def error_exception(e: PetalAnalysisError) -> HTTPException:
    error_detail = ErrorDetail(
        code=e.code,
        message=e.message,
        details=e.details,
        suggestions=e.suggestions,
    )
    return HTTPException(status_code=e.status_code, detail=error_detail.model_dump())


def internal_error_exception(e: Exception) -> HTTPException:
    logger.exception("Unexpected error during analysis")
    error_detail = ErrorDetail(code="INTERNAL_ERROR", message=str(e))
    return HTTPException(status_code=500, detail=error_detail.model_dump())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "petal-counter"}


@router.post("/analyze", response_model=AnalysisResponse, responses=ERROR_RESPONSES)
async def analyze_flower(
    image: UploadFile = File(..., description="Flower photograph (JPG, PNG or WebP, up to 10MB)"),
    include_image: bool = Form(default=False, description="Return the upload as a data URL"),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
):
    """
    Estimate the petal count of a single uploaded flower image.

    Returns the petal count, a flower-type guess and a confidence score.
    """
    try:
        uploaded = await read_upload(image)
        validate_upload(uploaded)

        result = await pipeline.analyze(uploaded.data)

        stats = result.statistics
        return AnalysisResponse(
            success=True,
            result=build_result(result),
            statistics=PixelStatisticsInfo(
                bright_pixels=stats.bright_pixels,
                color_variation=stats.color_variation,
                total_pixels=stats.total_pixels,
                bright_ratio=stats.bright_ratio,
                edge_ratio=stats.edge_ratio,
            ),
            image=ImageInfo(
                width=result.width,
                height=result.height,
                data_url=to_data_url(uploaded) if include_image else None,
            ),
        )

    except PetalAnalysisError as e:
        raise error_exception(e)

    except Exception as e:
        raise internal_error_exception(e)


@router.get("/session", response_model=SessionResponse)
async def get_session_state(session: AnalysisSession = Depends(get_session)):
    """Current uploaded image, result, error and flags."""
    return build_session_response(session.snapshot())


@router.post(
    "/session/upload",
    response_model=SessionResponse,
    responses={**ERROR_RESPONSES, 400: {"model": SessionResponse}},
)
async def upload_to_session(
    images: list[UploadFile] = File(..., description="Selected or dropped files; only the first is used"),
    source: str = Form(default="picker", pattern="^(picker|drop)$"),
    session: AnalysisSession = Depends(get_session),
):
    """
    Upload into the session and run the analysis.

    Validation and decoding errors are reported in the ``error`` field of the
    returned session, with the error's status code.
    """
    if session.is_analyzing:
        raise error_exception(AnalysisInProgressError())

    try:
        # Only the first file is processed
        if len(images) > 1:
            logger.debug(f"Ignoring {len(images) - 1} additional upload(s)")
        files = [await read_upload(images[0])]
        if source == "drop":
            await session.drop(files)
        else:
            await session.select(files)

    except AnalysisInProgressError as e:
        raise error_exception(e)

    except PetalAnalysisError as e:
        response = build_session_response(session.snapshot())
        return JSONResponse(status_code=e.status_code, content=response.model_dump(mode="json"))

    except Exception as e:
        raise internal_error_exception(e)

    return build_session_response(session.snapshot())


@router.post("/session/drag", response_model=SessionResponse)
async def drag_event(body: DragEventRequest, session: AnalysisSession = Depends(get_session)):
    """Track whether a drag is hovering over the upload area."""
    if body.event == DragEvent.DRAGENTER:
        session.drag_enter()
    elif body.event == DragEvent.DRAGOVER:
        session.drag_over()
    elif body.event == DragEvent.DRAGLEAVE:
        session.drag_leave()
    else:
        # Files arrive through /session/upload with source=drop
        await session.drop(None)
    return build_session_response(session.snapshot())


@router.delete("/session", response_model=SessionResponse)
async def reset_session(session: AnalysisSession = Depends(get_session)):
    """Clear the uploaded image, result, error and analyzing flag."""
    session.reset()
    return build_session_response(session.snapshot())
