"""Preview renderer for the Lumina Studio editor.

This module renders the preview of the current committed image with the
transient adjustments applied. Rendering is a pure function of its inputs:
neither the image nor the adjustments are modified.
"""

import logging
from typing import Any, Dict, Optional

import cv2
import numpy as np

from .adjustments import FilterOperation, ImageAdjustments
from .errors import RenderError
from .history import ImageState
from .utils import denormalize_image, load_image, normalize_image

# Set up logging
logger = logging.getLogger(__name__)

# CSS filter function and unit for each operation, used by to_css()
_CSS_FUNCTIONS = {
    "brightness": ("brightness", "%"),
    "contrast": ("contrast", "%"),
    "saturate": ("saturate", "%"),
    "grayscale": ("grayscale", "%"),
    "sepia": ("sepia", "%"),
    "blur": ("blur", "px"),
}


class PreviewRenderer:
    """Applies an adjustment filter chain to images."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the preview renderer.

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self._validate_config()

    def _validate_config(self) -> None:
        """Validate and set default configuration parameters."""
        defaults = {
            'max_blur_radius': 20.0,  # Upper bound on the blur standard deviation in pixels
        }

        for key, value in defaults.items():
            if key not in self.config:
                self.config[key] = value

    def render(self, image_source, adjustments: ImageAdjustments) -> np.ndarray:
        """Render an image with adjustments applied.

        Filters run in the order given by ``adjustments.filter_chain()``.

        Args:
            image_source: Input image as file path, encoded bytes or RGB numpy array
            adjustments: Slider values to apply

        Returns:
            Rendered image as a new RGB uint8 numpy array
        """
        image = load_image(image_source)
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        image = image[:, :, :3]
        chain = [op for op in adjustments.filter_chain() if not op.is_identity()]
        if not chain:
            return image.copy()

        result = normalize_image(image)
        for operation in chain:
            result = self._apply_operation(result, operation)
        return denormalize_image(result)

    def render_state(self, state: ImageState, adjustments: ImageAdjustments) -> np.ndarray:
        """Decode a committed image state and render it.

        Raises:
            RenderError: If the image data cannot be decoded
        """
        try:
            image = state.decode()
        except ValueError as e:
            logger.error(f"Failed to decode {state!r}: {e}")
            raise RenderError(f"Could not decode image {state.id}") from e
        return self.render(image, adjustments)

    def _apply_operation(self, image: np.ndarray, operation: FilterOperation) -> np.ndarray:
        """Apply a single filter operation to a normalized float image.

        Args:
            image: Input image with values in [0, 1]
            operation: Filter operation to apply

        Returns:
            Processed image with values in [0, 1]
        """
        if operation.name == "brightness":
            return self._apply_brightness(image, operation.amount / 100.0)
        elif operation.name == "contrast":
            return self._apply_contrast(image, operation.amount / 100.0)
        elif operation.name == "saturate":
            return self._apply_saturate(image, operation.amount / 100.0)
        elif operation.name == "grayscale":
            return self._apply_grayscale(image, operation.amount / 100.0)
        elif operation.name == "sepia":
            return self._apply_sepia(image, operation.amount / 100.0)
        elif operation.name == "blur":
            return self._apply_blur(image, operation.amount)
        else:
            logger.warning(f"Unknown filter operation: {operation.name}")
            return image

    def _apply_brightness(self, image: np.ndarray, amount: float) -> np.ndarray:
        """Scale every channel linearly by ``amount``."""
        return np.clip(image * amount, 0, 1.0)

    def _apply_contrast(self, image: np.ndarray, amount: float) -> np.ndarray:
        """Scale every channel around mid-gray by ``amount``."""
        return np.clip((image - 0.5) * amount + 0.5, 0, 1.0)

    def _apply_saturate(self, image: np.ndarray, amount: float) -> np.ndarray:
        """Apply the saturate colour matrix (0 is fully desaturated, 1 is unchanged)."""
        s = amount
        matrix = np.array([
            [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
        ], dtype=np.float32)
        return self._apply_color_matrix(image, matrix)

    def _apply_grayscale(self, image: np.ndarray, amount: float) -> np.ndarray:
        """Mix towards luminance grayscale (1 is fully gray)."""
        a = 1.0 - min(max(amount, 0.0), 1.0)
        matrix = np.array([
            [0.2126 + 0.7874 * a, 0.7152 - 0.7152 * a, 0.0722 - 0.0722 * a],
            [0.2126 - 0.2126 * a, 0.7152 + 0.2848 * a, 0.0722 - 0.0722 * a],
            [0.2126 - 0.2126 * a, 0.7152 - 0.7152 * a, 0.0722 + 0.9278 * a],
        ], dtype=np.float32)
        return self._apply_color_matrix(image, matrix)

    def _apply_sepia(self, image: np.ndarray, amount: float) -> np.ndarray:
        """Mix towards sepia tone (1 is full sepia)."""
        a = 1.0 - min(max(amount, 0.0), 1.0)
        matrix = np.array([
            [0.393 + 0.607 * a, 0.769 - 0.769 * a, 0.189 - 0.189 * a],
            [0.349 - 0.349 * a, 0.686 + 0.314 * a, 0.168 - 0.168 * a],
            [0.272 - 0.272 * a, 0.534 - 0.534 * a, 0.131 + 0.869 * a],
        ], dtype=np.float32)
        return self._apply_color_matrix(image, matrix)

    def _apply_blur(self, image: np.ndarray, radius: float) -> np.ndarray:
        """Gaussian blur with standard deviation ``radius`` pixels."""
        sigma = min(radius, self.config['max_blur_radius'])
        if sigma <= 0:
            return image
        return cv2.GaussianBlur(image, (0, 0), sigmaX=sigma, sigmaY=sigma)

    def _apply_color_matrix(self, image: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        """Multiply every RGB pixel by a 3x3 colour matrix."""
        result = cv2.transform(image.astype(np.float32), matrix)
        return np.clip(result, 0, 1.0)


def to_css(adjustments: ImageAdjustments) -> str:
    """Build the equivalent CSS ``filter`` value for a set of adjustments.

    Example:
        ``brightness(80%) contrast(150%) saturate(0%) grayscale(0%) sepia(0%) blur(0px)``
    """
    parts = []
    for operation in adjustments.filter_chain():
        function, unit = _CSS_FUNCTIONS[operation.name]
        parts.append(f"{function}({operation.amount:g}{unit})")
    return " ".join(parts)


def render_preview(state: ImageState, adjustments: ImageAdjustments,
                   renderer: Optional[PreviewRenderer] = None) -> np.ndarray:
    """Render ``state`` with ``adjustments`` using a default renderer."""
    return (renderer or PreviewRenderer()).render_state(state, adjustments)
