"""Utility functions for the Lumina Studio editor."""

import base64
import io
import logging
import os
import re
from typing import BinaryIO, Tuple, Union

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# Define supported image formats
SUPPORTED_FORMATS = {
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.png': 'PNG',
    '.tiff': 'TIFF',
    '.tif': 'TIFF',
    '.bmp': 'BMP',
    '.gif': 'GIF',
    '.webp': 'WEBP',
}

MIME_TYPES = {
    'JPEG': 'image/jpeg',
    'PNG': 'image/png',
    'TIFF': 'image/tiff',
    'BMP': 'image/bmp',
    'GIF': 'image/gif',
    'WEBP': 'image/webp',
}

DEFAULT_MIME_TYPE = 'image/png'

_DATA_URL_PATTERN = re.compile(r'^data:(.+?);base64,')


def load_image(source: Union[str, bytes, BinaryIO, np.ndarray]) -> np.ndarray:
    """Load an image from a file path, raw bytes, file object, or numpy array.

    Args:
        source: Source image as a file path, encoded bytes, file object, or numpy array

    Returns:
        Loaded image as numpy array in RGB format

    Raises:
        ValueError: If image could not be loaded
    """
    if isinstance(source, np.ndarray):
        return source

    if isinstance(source, str):
        try:
            with Image.open(source) as img:
                if img.mode != 'RGB':
                    img = img.convert('RGB')
                return np.array(img)
        except Exception:
            # Fall back to OpenCV
            image = cv2.imread(source)
            if image is None:
                raise ValueError(f"Could not load image at {source}")
            return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    if isinstance(source, (bytes, bytearray)):
        return decode_image(bytes(source))

    pos = source.tell()
    try:
        source.seek(0)
        return decode_image(source.read())
    finally:
        source.seek(pos)


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an RGB numpy array.

    Args:
        data: Encoded image bytes (any format Pillow or OpenCV can read)

    Returns:
        Decoded image as numpy array in RGB format

    Raises:
        ValueError: If the bytes could not be decoded
    """
    if not data:
        raise ValueError("Cannot decode an empty image")

    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode != 'RGB':
                img = img.convert('RGB')
            return np.array(img)
    except Exception as pil_error:
        logger.debug(f"Pillow could not decode image, trying OpenCV: {pil_error}")

    file_bytes = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(file_bytes, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Could not decode image data with Pillow or OpenCV")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def save_image(image: np.ndarray, output_path: str, quality: int = 95) -> None:
    """Save an image to file path.

    Args:
        image: Image as numpy array in RGB format
        output_path: Path where the image will be saved
        quality: Quality for lossy formats (0-100)

    Raises:
        RuntimeError: If image saving fails
    """
    try:
        output_dir = os.path.dirname(output_path)
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir, exist_ok=True)

        ext = os.path.splitext(output_path)[1].lower()
        with open(output_path, 'wb') as f:
            f.write(image_to_bytes(image, ext or '.png', quality))
    except Exception as e:
        raise RuntimeError(f"Error saving image to {output_path}: {str(e)}") from e


def image_to_bytes(image: np.ndarray, format: str = '.png', quality: int = 95) -> bytes:
    """Convert an image to encoded bytes.

    Args:
        image: Image as numpy array in RGB format
        format: Image format extension (e.g., '.jpg', '.png')
        quality: Quality for lossy formats (0-100)

    Returns:
        Image encoded as bytes

    Raises:
        RuntimeError: If image conversion fails
    """
    try:
        pil_image = Image.fromarray(image.astype('uint8'), 'RGB')
        format_name = format_name_for(format)

        buffer = io.BytesIO()
        save_args = {}
        if format_name == 'JPEG':
            save_args['quality'] = quality
            save_args['optimize'] = True
        elif format_name == 'PNG':
            save_args['optimize'] = True

        pil_image.save(buffer, format=format_name, **save_args)
        return buffer.getvalue()
    except Exception as e:
        raise RuntimeError(f"Error converting image to bytes: {str(e)}") from e


def format_name_for(format: str) -> str:
    """Map an extension ('.jpg') or bare name ('jpg', 'png') to a Pillow format name."""
    ext = format.lower()
    if not ext.startswith('.'):
        ext = '.' + ext
    return SUPPORTED_FORMATS.get(ext, 'PNG')


def mime_type_for(format: str) -> str:
    """Get the MIME type for a format extension or name."""
    return MIME_TYPES[format_name_for(format)]


def get_mime_type(data_url: str) -> str:
    """Get the MIME type from a base64 data URL, defaulting to PNG."""
    match = _DATA_URL_PATTERN.match(data_url)
    return match.group(1) if match else DEFAULT_MIME_TYPE


def clean_base64(data_url: str) -> str:
    """Strip the ``data:<mime>;base64,`` prefix from a data URL if present."""
    parts = data_url.split(',', 1)
    return parts[1] if len(parts) == 2 and parts[1] else data_url


def decode_data_url(data_url: str) -> Tuple[bytes, str]:
    """Decode a base64 data URL into (bytes, mime type).

    Raises:
        ValueError: If the payload is not valid base64
    """
    try:
        data = base64.b64decode(clean_base64(data_url), validate=True)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e
    return data, get_mime_type(data_url)


def encode_data_url(data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Encode image bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def sniff_mime_type(data: bytes) -> str:
    """Guess the MIME type of encoded image bytes using Pillow."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return MIME_TYPES.get(img.format, DEFAULT_MIME_TYPE)
    except Exception:
        return DEFAULT_MIME_TYPE


def normalize_image(image: np.ndarray) -> np.ndarray:
    """Normalize image values to [0, 1] range."""
    return image.astype(np.float32) / 255.0


def denormalize_image(image: np.ndarray) -> np.ndarray:
    """Convert normalized image back to [0, 255] range."""
    return np.clip(np.rint(image * 255.0), 0, 255).astype(np.uint8)


def is_supported_format(file_path: str) -> bool:
    """Check if image format is supported.

    Args:
        file_path: Path to the image file

    Returns:
        True if format is supported, False otherwise
    """
    ext = os.path.splitext(file_path)[1].lower()
    return ext in SUPPORTED_FORMATS
