"""Decoding of uploaded bytes into an RGBA pixel buffer."""

import cv2
import numpy as np

from petal_counter.core.exceptions import AnalysisFailureError

JPEG_MAGIC = b"\xff\xd8"

TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


def decode_rgba(data: bytes) -> np.ndarray:
    """
    Decode image bytes to a (height, width, 4) RGBA array.

    Pixels come out the way a browser canvas reports them: 8 bits per
    channel, and fully transparent pixels read as (0, 0, 0, 0).

    Args:
        data: Encoded JPEG, PNG or WebP bytes

    Returns:
        uint8 array in RGBA channel order

    Raises:
        AnalysisFailureError: If the bytes cannot be decoded
    """
    if not data:
        raise AnalysisFailureError(details={"reason": "empty image data"})

    # JPEG has no alpha; IMREAD_COLOR also applies its EXIF orientation
    flags = cv2.IMREAD_COLOR if data.startswith(JPEG_MAGIC) else cv2.IMREAD_UNCHANGED

    nparr = np.frombuffer(data, np.uint8)
    try:
        image = cv2.imdecode(nparr, flags)
    except cv2.error as e:
        raise AnalysisFailureError(details={"reason": str(e)}) from e

    if image is None or image.size == 0:
        raise AnalysisFailureError(details={"reason": "could not decode image data"})

    if image.dtype == np.uint16:
        image = cv2.convertScaleAbs(image, alpha=1 / 257)
    elif image.dtype != np.uint8:
        raise AnalysisFailureError(details={"reason": f"unsupported pixel depth {image.dtype}"})

    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels not in TO_RGBA:
        raise AnalysisFailureError(details={"reason": f"unsupported channel count {channels}"})

    rgba = cv2.cvtColor(image, TO_RGBA[channels])
    rgba[rgba[..., 3] == 0, :3] = 0

    return rgba
