"""Editing session for the Lumina Studio editor.

An ``EditorSession`` is the single owner of all editing state: the edit
history, the transient adjustments, the gallery, the UI language and the
loading flags of in-flight AI actions.

Session protocol:
- Every cursor move (commit, undo, redo, reset) resets adjustments to baseline
- Adjustments and presets never touch history
- AI actions are rejected locally when there is no image, the instruction is
  empty, or the same action is already in flight
- A failed AI action leaves history and adjustments unchanged and records a
  localized generic error
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import numpy as np

from .adjustments import ImageAdjustments
from .ai_service import GeminiImageService, build_erase_instruction
from .errors import PreconditionError, RenderError, ServiceError
from .executor import PreviewRenderer
from .gallery import Gallery, GalleryEntry
from .history import EditHistory, ImageState
from .presets import PresetFilter, get_preset
from .translations import DEFAULT_LANGUAGE, translate, validate_language
from .utils import format_name_for, image_to_bytes, mime_type_for

logger = logging.getLogger(__name__)

AI_ACTIONS = ('identify', 'edit', 'erase')


class ExportArtifact:
    """A downloadable encoded image produced by ``EditorSession.export``."""

    def __init__(self, filename: str, data: bytes, mime_type: str):
        self.filename = filename
        self.data = data
        self.mime_type = mime_type

    def __repr__(self):
        return f"ExportArtifact(filename={self.filename!r}, mime_type={self.mime_type!r}, size={len(self.data)})"


class EditorSession:
    """Controller owning the state of one editing session."""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 service: Optional[GeminiImageService] = None,
                 renderer: Optional[PreviewRenderer] = None):
        """Initialize an editing session.

        Args:
            config: Configuration dictionary
            service: Image analysis/edit service; a Gemini service by default
            renderer: Preview renderer; a default renderer when omitted
        """
        self.config = config or {}
        self._validate_config()

        self.service = service if service is not None else GeminiImageService()
        self.renderer = renderer if renderer is not None else PreviewRenderer()

        self.history = EditHistory()
        self.gallery = Gallery()
        self.adjustments = ImageAdjustments.baseline()
        self.language = validate_language(self.config['language'])
        self.identify_result: Optional[str] = None
        self.last_error: Optional[str] = None
        self.last_export: Optional[ExportArtifact] = None
        self._loading = set()

    def _validate_config(self) -> None:
        """Validate and set default configuration parameters."""
        defaults = {
            'language': DEFAULT_LANGUAGE,
            'export_format': 'png',
            'gallery_on_export': True,
            'gallery_on_ai_edit': True,
        }

        for key, value in defaults.items():
            if key not in self.config:
                self.config[key] = value

    # -- State queries -------------------------------------------------------

    def t(self, key: str) -> str:
        """Translate a UI string into the session language."""
        return translate(key, self.language)

    def set_language(self, language: str) -> None:
        """Switch the session language ('en' or 'ar')."""
        self.language = validate_language(language)

    def current(self) -> Optional[ImageState]:
        """Get the current committed image state, or None."""
        return self.history.current()

    def has_image(self) -> bool:
        return not self.history.is_empty()

    def is_loading(self, action: Optional[str] = None) -> bool:
        """Check whether an AI action (or any, when ``action`` is None) is in flight."""
        if action is None:
            return bool(self._loading)
        return action in self._loading

    def clear_error(self) -> None:
        self.last_error = None

    # -- History -------------------------------------------------------------

    def _replace_adjustments(self, adjustments: ImageAdjustments) -> ImageAdjustments:
        # An export only matches the preview it was rendered from
        self.adjustments = adjustments
        self.last_export = None
        return adjustments

    def _on_cursor_moved(self) -> None:
        self._replace_adjustments(ImageAdjustments.baseline())
        self.identify_result = None

    def import_image(self, data: bytes, mime_type: Optional[str] = None, source: str = 'upload') -> ImageState:
        """Import an encoded image as the root of a new history.

        Args:
            data: Encoded image bytes
            mime_type: MIME type; sniffed when omitted
            source: Origin label stored on the state

        Returns:
            The new root state
        """
        state = ImageState(data, mime_type=mime_type, source=source)
        self.history.start(state)
        self._on_cursor_moved()
        self.last_error = None
        logger.info(f"Imported {state!r} as new history root")
        return state

    def load_from_gallery(self, entry_id: str) -> ImageState:
        """Start a new history from a gallery entry.

        Raises:
            KeyError: If the gallery entry does not exist
        """
        entry = self.gallery.get(entry_id)
        return self.import_image(entry.image.data, mime_type=entry.image.mime_type, source='gallery')

    def commit(self, state: ImageState) -> ImageState:
        """Commit a state to history and reset adjustments."""
        self.history.commit(state)
        self._on_cursor_moved()
        return state

    def undo(self) -> bool:
        """Step back in history; adjustments reset to baseline."""
        moved = self.history.undo()
        self._on_cursor_moved()
        return moved

    def redo(self) -> bool:
        """Step forward in history; adjustments reset to baseline."""
        moved = self.history.redo()
        self._on_cursor_moved()
        return moved

    def reset(self) -> bool:
        """Return to the first committed state, keeping later entries for redo."""
        moved = self.history.reset_to_root()
        self._on_cursor_moved()
        return moved

    # -- Adjustments ---------------------------------------------------------

    def set_adjustment(self, name: str, value: float) -> ImageAdjustments:
        """Change one slider; the value is clamped to its range."""
        return self._replace_adjustments(self.adjustments.with_value(name, value))

    def set_adjustments(self, adjustments: ImageAdjustments) -> ImageAdjustments:
        """Replace all sliders at once."""
        return self._replace_adjustments(adjustments)

    def apply_preset(self, preset_id: str) -> PresetFilter:
        """Overwrite the adjustments with a preset's values.

        Raises:
            ValueError: If the preset is not found
        """
        preset = get_preset(preset_id)
        self._replace_adjustments(preset.adjustments)
        logger.info(f"Applied preset '{preset.id}'")
        return preset

    def reset_adjustments(self) -> None:
        self._replace_adjustments(ImageAdjustments.baseline())

    # -- Rendering -----------------------------------------------------------

    def preview(self) -> Optional[np.ndarray]:
        """Render the current state with the current adjustments.

        Returns:
            RGB array, or None when there is no image or it cannot be decoded
        """
        state = self.history.current()
        if state is None:
            return None
        try:
            return self.renderer.render_state(state, self.adjustments)
        except RenderError:
            self.last_error = self.t('renderError')
            return None

    def export(self, fmt: Optional[str] = None, add_to_gallery: Optional[bool] = None) -> ExportArtifact:
        """Encode the rendered preview as a downloadable file.

        Args:
            fmt: Output format ('png', 'jpg', ...); config 'export_format' by default
            add_to_gallery: Whether to also add the export to the gallery;
                config 'gallery_on_export' by default

        Returns:
            The encoded artifact

        Raises:
            PreconditionError: If there is no image
            RenderError: If the current image cannot be decoded
        """
        self._require_image()
        fmt = (fmt or self.config['export_format']).lower().lstrip('.')
        if add_to_gallery is None:
            add_to_gallery = self.config['gallery_on_export']

        rendered = self.preview()
        if rendered is None:
            raise RenderError("Cannot export an image that failed to render")

        data = image_to_bytes(rendered, '.' + fmt)
        mime_type = mime_type_for(fmt)
        format_name = format_name_for(fmt)
        extension = 'jpg' if format_name == 'JPEG' else format_name.lower()
        artifact = ExportArtifact(f"lumina-edit-{int(time.time() * 1000)}.{extension}", data, mime_type)

        if add_to_gallery:
            self.gallery.add(ImageState(data, mime_type=mime_type, source='export'))
        self.last_export = artifact
        logger.info(f"Exported {artifact!r}")
        return artifact

    def remove_from_gallery(self, entry_id: str) -> GalleryEntry:
        return self.gallery.remove(entry_id)

    # -- AI actions ----------------------------------------------------------

    def _require_image(self) -> ImageState:
        state = self.history.current()
        if state is None:
            raise PreconditionError(self.t('noImage'))
        return state

    @contextmanager
    def _loading_flag(self, action: str) -> Iterator[None]:
        if action in self._loading:
            raise PreconditionError(self.t('busy'))
        self._loading.add(action)
        try:
            yield
        finally:
            self._loading.discard(action)

    def _service_input(self, state: ImageState) -> ImageState:
        """Get the image sent to the service: the preview as the user sees it."""
        if self.adjustments.is_baseline():
            return state
        rendered = self.preview()
        if rendered is None:
            return state
        return ImageState.from_array(rendered, source='export')

    def identify(self) -> Optional[str]:
        """Ask the analysis service to describe the current image.

        Returns:
            The description, or None if the service failed (see ``last_error``)

        Raises:
            PreconditionError: If there is no image or identify is already running
        """
        state = self._require_image()
        with self._loading_flag('identify'):
            self.identify_result = None
            self.last_error = None
            try:
                result = self.service.identify(self._service_input(state), self.language)
            except ServiceError as e:
                logger.error(f"Identify failed: {e}")
                self.last_error = self.t('error')
                return None
            self.identify_result = result
            return result

    def ai_edit(self, instruction: str, action: str = 'edit') -> Optional[ImageState]:
        """Edit the current image with a natural-language instruction.

        On success the result is committed to history, adjustments reset to
        baseline and the result is added to the gallery.

        Args:
            instruction: What to change
            action: Loading flag name ('edit' or 'erase')

        Returns:
            The new current state, or None if the service failed (see ``last_error``)

        Raises:
            PreconditionError: If there is no image, the instruction is empty,
                or this action is already running
        """
        state = self._require_image()
        instruction = (instruction or '').strip()
        if not instruction:
            raise PreconditionError(self.t('emptyInstruction'))

        with self._loading_flag(action):
            self.last_error = None
            try:
                new_state = self.service.edit(self._service_input(state), instruction)
            except ServiceError as e:
                logger.error(f"AI edit failed: {e}")
                self.last_error = self.t('error')
                return None

            self.commit(new_state)
            if self.config['gallery_on_ai_edit']:
                self.gallery.add(new_state)
            return new_state

    def erase(self, target: str) -> Optional[ImageState]:
        """Remove an object from the current image, described by ``target``."""
        self._require_image()
        if not (target or '').strip():
            raise PreconditionError(self.t('emptyInstruction'))
        return self.ai_edit(build_erase_instruction(target), action='erase')
