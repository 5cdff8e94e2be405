"""Image format conversion utilities.

Three representations meet at the processor boundary:

- encoded bytes as they flow through the host (PNG, JPEG, PGM, ...)
- a Pillow ``Image`` as the decoded image container
- an OpenCV matrix (``numpy.ndarray``) as consumed by ``cv2.face``

Matrices are either 2-D grayscale ``uint8`` or HxWx3 BGR ``uint8``, following
OpenCV conventions. All helpers are stateless.
"""
import io
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.exceptions import DecodeError, ImageReadError


def decode_image(data: bytes) -> Image.Image:
    """Decode an encoded byte stream into an image container.

    Args:
        data: Encoded image bytes.

    Returns:
        Fully loaded Pillow image.

    Raises:
        DecodeError: If the bytes are empty or not a supported image.
    """
    if not data:
        raise DecodeError("Cannot decode an empty byte stream")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(f"Malformed image ({len(data)} bytes): {e}") from e
    return image


def to_matrix(image: Image.Image, grayscale: bool = True) -> np.ndarray:
    """Convert an image container into an OpenCV matrix.

    Args:
        image: Pillow image in any mode.
        grayscale: Produce a 2-D single-channel matrix (default) instead of BGR.

    Returns:
        Contiguous uint8 array, HxW when grayscale, HxWx3 BGR otherwise.
    """
    if grayscale:
        return np.ascontiguousarray(np.asarray(image.convert("L"), dtype=np.uint8))

    rgb = np.asarray(image.convert("RGB"), dtype=np.uint8)
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def to_image(matrix: np.ndarray) -> Image.Image:
    """Convert an OpenCV matrix into an image container.

    Args:
        matrix: HxW grayscale or HxWx3 BGR uint8 array.

    Raises:
        ValueError: If the matrix shape is not grayscale or 3-channel.
    """
    if matrix.ndim == 2:
        return Image.fromarray(matrix.astype(np.uint8))
    if matrix.ndim == 3 and matrix.shape[2] == 3:
        rgb = cv2.cvtColor(matrix.astype(np.uint8), cv2.COLOR_BGR2RGB)
        return Image.fromarray(rgb)
    raise ValueError(f"Unsupported matrix shape {matrix.shape}")


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Encode an image container as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def matrix_to_png_bytes(matrix: np.ndarray) -> bytes:
    """Encode an OpenCV matrix as PNG bytes (lossless)."""
    return image_to_png_bytes(to_image(matrix))


def decode_matrix(data: bytes) -> np.ndarray:
    """Decode encoded bytes straight into a grayscale matrix."""
    return to_matrix(decode_image(data), grayscale=True)


def read_grayscale(path: str | Path) -> np.ndarray:
    """Read an image file as a grayscale matrix.

    Raises:
        ImageReadError: If OpenCV cannot read or decode the file.
    """
    matrix = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if matrix is None:
        raise ImageReadError(f"Cannot read image: {path}")
    return matrix


def save_matrix(path: str | Path, matrix: np.ndarray) -> Path:
    """Write a matrix to disk; the format follows the file extension.

    Raises:
        IOError: If OpenCV fails to write the file.
    """
    path = Path(path)
    if not cv2.imwrite(str(path), matrix):
        raise IOError(f"Failed to write image: {path}")
    return path
