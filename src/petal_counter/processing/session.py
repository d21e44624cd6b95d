"""Single-user analysis session state."""

from dataclasses import dataclass
import logging

from petal_counter.core.exceptions import (
    AnalysisFailureError,
    AnalysisInProgressError,
    PetalAnalysisError,
)
from .pipeline import AnalysisPipeline, AnalysisResult
from .upload import UploadedFile, first_file, to_data_url, validate_upload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedImage:
    """The accepted upload as shown back to the user."""

    filename: str
    content_type: str
    data_url: str


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for rendering."""

    uploaded_image: UploadedImage | None
    result: AnalysisResult | None
    error: str | None
    is_analyzing: bool
    drag_active: bool


class AnalysisSession:
    """
    Holds the uploaded image, the latest result, the latest error and the
    analyzing/drag flags.

    Only one analysis runs at a time: uploads arriving while the pipeline is
    waiting are refused with AnalysisInProgressError.
    """

    def __init__(self, pipeline: AnalysisPipeline | None = None):
        self.pipeline = pipeline or AnalysisPipeline()
        self.uploaded_image: UploadedImage | None = None
        self.result: AnalysisResult | None = None
        self.error: str | None = None
        self.is_analyzing = False
        self.drag_active = False
        # Bumped by reset() so an analysis started before it cannot write back
        self._generation = 0

    def drag_enter(self) -> None:
        self.drag_active = True

    def drag_over(self) -> None:
        self.drag_active = True

    def drag_leave(self) -> None:
        self.drag_active = False

    async def drop(self, files: list[UploadedFile] | None) -> AnalysisResult | None:
        """Handle a drop; only the first dropped file is processed."""
        self.drag_active = False
        file = first_file(files)
        if file is None:
            return None
        return await self.submit(file)

    async def select(self, files: list[UploadedFile] | None) -> AnalysisResult | None:
        """Handle a file-picker selection; only the first file is processed."""
        file = first_file(files)
        if file is None:
            return None
        return await self.submit(file)

    async def submit(self, file: UploadedFile) -> AnalysisResult | None:
        """
        Validate a file and analyze it.

        Validation failures set ``error`` and leave everything else as it was.
        A successful validation clears the previous error and result before
        the analysis starts.

        Returns:
            The new result, or None if the session was reset mid-analysis

        Raises:
            AnalysisInProgressError: If another analysis is still running
            InvalidFileTypeError, FileTooLargeError: If validation fails
            AnalysisFailureError: If the image cannot be decoded
        """
        if self.is_analyzing:
            raise AnalysisInProgressError()

        try:
            validate_upload(file)
        except PetalAnalysisError as e:
            self.error = e.message
            raise

        self.error = None
        self.uploaded_image = UploadedImage(
            filename=file.filename,
            content_type=file.content_type,
            data_url=to_data_url(file),
        )
        self.result = None
        self.is_analyzing = True
        generation = self._generation

        try:
            result = await self.pipeline.analyze(file.data)
        except AnalysisFailureError as e:
            if generation == self._generation:
                logger.warning(f"Analysis of {file.filename!r} failed: {e.details}")
                self.error = e.message
            raise
        finally:
            if generation == self._generation:
                self.is_analyzing = False

        if generation != self._generation:
            logger.info(f"Discarding result for {file.filename!r}: session was reset")
            return None

        self.result = result
        return result

    def reset(self) -> None:
        """Clear the image, result, error and flags together."""
        self._generation += 1
        self.uploaded_image = None
        self.result = None
        self.error = None
        self.is_analyzing = False
        self.drag_active = False

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            uploaded_image=self.uploaded_image,
            result=self.result,
            error=self.error,
            is_analyzing=self.is_analyzing,
            drag_active=self.drag_active,
        )
