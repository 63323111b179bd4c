"""Lumina Studio photo editor.

Upload a photo, tune it with filter-based adjustments and presets, and use a
hosted generative model to identify its content or edit it from a plain
instruction. Edits are non-destructive: committed images live in an
undo/redo history and adjustments only affect the rendered preview.
"""

__version__ = "0.1.0"

from .adjustments import ImageAdjustments, DEFAULT_ADJUSTMENTS
from .errors import LuminaError, PreconditionError, RenderError, ServiceError
from .executor import PreviewRenderer, render_preview, to_css
from .gallery import Gallery, GalleryEntry
from .history import EditHistory, ImageState
from .presets import PresetFilter, get_available_presets, get_preset
from .session import EditorSession, ExportArtifact
from .utils import load_image, save_image

# Import web app if Streamlit is installed
try:
    from .web import run_web_app
except ImportError:
    def run_web_app():
        """Placeholder function when Streamlit is not installed."""
        raise ImportError("Streamlit is required to run the web app. Please install it with 'pip install lumina-studio[web]'")


def apply_adjustments(image_source, adjustments=None, preset=None):
    """Render an image with a preset and/or adjustments applied.

    Args:
        image_source: Path to the image, encoded bytes or a numpy array
        adjustments: Optional ImageAdjustments (or dict of slider values)
        preset: Optional preset id; applied first, then ``adjustments`` override it

    Returns:
        Rendered image as a numpy array
    """
    values = get_preset(preset).adjustments if preset else ImageAdjustments.baseline()
    if isinstance(adjustments, dict):
        values = values.with_values(**adjustments)
    elif adjustments is not None:
        values = adjustments
    return PreviewRenderer().render(image_source, values)
