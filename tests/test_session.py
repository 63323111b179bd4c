"""Tests for the session module."""

import io
import re
import unittest
from unittest import mock

import numpy as np
from PIL import Image

from lumina_studio.adjustments import ImageAdjustments
from lumina_studio.ai_service import GeminiImageService
from lumina_studio.errors import PreconditionError, RenderError, ServiceError
from lumina_studio.history import ImageState
from lumina_studio.session import EditorSession


def make_png(color=(200, 100, 50), size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


BASELINE = {"brightness": 100, "contrast": 100, "saturation": 100, "grayscale": 0, "sepia": 0, "blur": 0}


class TestEditorSession(unittest.TestCase):
    """Test cases for the EditorSession class."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = mock.create_autospec(GeminiImageService, instance=True)
        self.session = EditorSession(service=self.service)

    def _import_a(self) -> ImageState:
        return self.session.import_image(make_png((255, 0, 0)))

    def test_starts_empty(self):
        """Test the initial empty state."""
        self.assertIsNone(self.session.current())
        self.assertIsNone(self.session.preview())
        self.assertFalse(self.session.has_image())
        self.assertEqual(self.session.adjustments.to_dict(), BASELINE)

    def test_edit_history_scenario(self):
        """Test upload, preset, AI edit, undo and a branching commit."""
        a = self._import_a()
        self.assertEqual(self.session.history.entries(), [a])
        self.assertEqual(self.session.history.cursor, 0)

        self.session.apply_preset("dramatic")
        self.assertEqual(self.session.adjustments.contrast, 150)
        self.assertEqual(self.session.adjustments.saturation, 0)
        self.assertEqual(self.session.adjustments.brightness, 80)
        self.assertEqual(len(self.session.history), 1)
        preview = self.session.preview()
        self.assertLessEqual(int(preview.max()) - int(preview.min()), 1)  # saturation 0 is gray

        b = ImageState(make_png((0, 255, 0)), source="ai-edit")
        self.service.edit.return_value = b
        result = self.session.ai_edit("remove the cup")

        self.assertIs(result, b)
        self.assertEqual(self.session.history.entries(), [a, b])
        self.assertEqual(self.session.history.cursor, 1)
        self.assertEqual(self.session.adjustments.to_dict(), BASELINE)
        self.service.edit.assert_called_once()
        sent_state, instruction = self.service.edit.call_args.args
        self.assertEqual(instruction, "remove the cup")
        self.assertNotEqual(sent_state, a)  # the rendered preview is sent, not the raw upload

        self.session.apply_preset("vintage")
        self.assertTrue(self.session.undo())
        self.assertEqual(self.session.history.cursor, 0)
        self.assertIs(self.session.current(), a)
        self.assertEqual(self.session.adjustments.to_dict(), BASELINE)

        c = ImageState(make_png((0, 0, 255)))
        self.session.commit(c)
        self.assertEqual(self.session.history.entries(), [a, c])
        self.assertEqual(self.session.history.cursor, 1)

    def test_cursor_moves_always_reset_adjustments(self):
        """Test that reset, undo, redo and commit restore baseline adjustments."""
        self._import_a()
        self.session.commit(ImageState(make_png((1, 2, 3))))

        for move in (self.session.reset, self.session.redo, self.session.undo, self.session.undo):
            self.session.apply_preset("bw")
            move()
            self.assertEqual(self.session.adjustments.to_dict(), BASELINE)

        self.session.apply_preset("movie")
        self.session.commit(ImageState(make_png((4, 5, 6))))
        self.assertEqual(self.session.adjustments.to_dict(), BASELINE)

    def test_reset_keeps_redo(self):
        """Test that reset returns to the root without discarding later states."""
        a = self._import_a()
        b = self.session.commit(ImageState(make_png((0, 255, 0))))
        self.assertTrue(self.session.reset())
        self.assertIs(self.session.current(), a)
        self.assertTrue(self.session.redo())
        self.assertIs(self.session.current(), b)

    def test_import_starts_new_history(self):
        """Test that importing a file makes it the root of a new history."""
        self._import_a()
        self.session.commit(ImageState(make_png((0, 255, 0))))
        new_root = self.session.import_image(make_png((9, 9, 9)))
        self.assertEqual(self.session.history.entries(), [new_root])

    def test_identify_rejected_without_image(self):
        """Test that identify on an empty history makes no service call."""
        with self.assertRaises(PreconditionError):
            self.session.identify()
        self.service.identify.assert_not_called()

    def test_edit_rejected_without_image_or_instruction(self):
        """Test local rejection of edits without an image or with a blank instruction."""
        with self.assertRaises(PreconditionError):
            self.session.ai_edit("make it blue")
        self._import_a()
        with self.assertRaises(PreconditionError):
            self.session.ai_edit("   ")
        with self.assertRaises(PreconditionError):
            self.session.erase("")
        self.service.edit.assert_not_called()

    def test_failed_edit_leaves_state_unchanged(self):
        """Test that a service failure keeps history and adjustments and shows a generic error."""
        a = self._import_a()
        self.session.apply_preset("vintage")
        adjustments = self.session.adjustments
        self.service.edit.side_effect = ServiceError("model unavailable")

        result = self.session.ai_edit("remove the cup")

        self.assertIsNone(result)
        self.assertEqual(self.session.history.entries(), [a])
        self.assertEqual(self.session.history.cursor, 0)
        self.assertEqual(self.session.adjustments, adjustments)
        self.assertEqual(self.session.last_error, "An error occurred")
        self.assertFalse(self.session.is_loading('edit'))
        self.assertEqual(len(self.session.gallery), 0)

    def test_generic_error_is_localized(self):
        """Test that the generic error follows the session language."""
        self._import_a()
        self.session.set_language('ar')
        self.service.identify.side_effect = ServiceError("missing key")
        self.assertIsNone(self.session.identify())
        self.assertEqual(self.session.last_error, "حدث خطأ")

    def test_identify_stores_result(self):
        """Test that a successful identify stores the description and passes the language."""
        a = self._import_a()
        self.session.set_language('ar')
        self.service.identify.return_value = "كوب أحمر"

        self.assertEqual(self.session.identify(), "كوب أحمر")
        self.assertEqual(self.session.identify_result, "كوب أحمر")
        self.service.identify.assert_called_once_with(a, 'ar')

        self.session.undo()
        self.assertIsNone(self.session.identify_result)

    def test_duplicate_submission_rejected_while_loading(self):
        """Test that an in-flight action cannot be resubmitted but other actions still run."""
        self._import_a()
        nested = {}

        def slow_edit(state, instruction):
            self.assertTrue(self.session.is_loading('edit'))
            with self.assertRaises(PreconditionError):
                self.session.ai_edit("again")
            nested['identify'] = self.session.identify()
            return ImageState(make_png((0, 255, 0)), source="ai-edit")

        self.service.edit.side_effect = slow_edit
        self.service.identify.return_value = "a red square"

        self.assertIsNotNone(self.session.ai_edit("make it green"))
        self.assertEqual(nested['identify'], "a red square")
        self.assertEqual(self.service.edit.call_count, 1)
        self.assertFalse(self.session.is_loading())

    def test_erase_builds_removal_instruction(self):
        """Test that erase sends the object-removal instruction."""
        self._import_a()
        self.service.edit.return_value = ImageState(make_png((0, 255, 0)), source="ai-edit")
        self.session.erase("cup")
        instruction = self.service.edit.call_args.args[1]
        self.assertTrue(instruction.startswith("Remove the cup from this image"))

    def test_ai_edit_adds_to_gallery(self):
        """Test that AI results are added to the gallery, newest first."""
        self._import_a()
        first = ImageState(make_png((0, 255, 0)), source="ai-edit")
        second = ImageState(make_png((0, 0, 255)), source="ai-edit")
        self.service.edit.side_effect = [first, second]
        self.session.ai_edit("one")
        self.session.ai_edit("two")
        self.assertEqual([entry.image for entry in self.session.gallery], [second, first])

    def test_set_adjustment_does_not_touch_history(self):
        """Test that slider changes only affect the preview."""
        a = self._import_a()
        self.session.set_adjustment("brightness", 50)
        self.assertEqual(self.session.history.entries(), [a])
        preview = self.session.preview()
        self.assertTrue(np.all(np.abs(preview[:, :, 0].astype(int) - 128) <= 1))

    def test_export(self):
        """Test exporting the rendered preview."""
        self._import_a()
        self.session.apply_preset("bw")
        artifact = self.session.export()

        self.assertRegex(artifact.filename, r"^lumina-edit-\d+\.png$")
        self.assertEqual(artifact.mime_type, "image/png")
        with Image.open(io.BytesIO(artifact.data)) as img:
            self.assertEqual(img.size, (8, 8))
        self.assertEqual(len(self.session.gallery), 1)
        self.assertEqual(len(self.session.history), 1)

        jpeg = self.session.export("jpg", add_to_gallery=False)
        self.assertTrue(re.match(r"^lumina-edit-\d+\.jpg$", jpeg.filename))
        self.assertEqual(jpeg.mime_type, "image/jpeg")
        self.assertEqual(len(self.session.gallery), 1)

    def test_last_export_cleared_when_preview_changes(self):
        """Test that a stored export is dropped once it no longer matches the preview."""
        self._import_a()
        self.session.commit(ImageState(make_png((0, 255, 0))))
        changes = (
            self.session.undo,
            self.session.redo,
            self.session.reset,
            lambda: self.session.set_adjustment("sepia", 30),
            lambda: self.session.apply_preset("movie"),
            self.session.reset_adjustments,
            lambda: self.session.import_image(make_png((9, 9, 9))),
        )
        for change in changes:
            artifact = self.session.export(add_to_gallery=False)
            self.assertIs(self.session.last_export, artifact)
            change()
            self.assertIsNone(self.session.last_export)

    def test_export_requires_image(self):
        """Test that export without an image is rejected."""
        with self.assertRaises(PreconditionError):
            self.session.export()

    def test_undecodable_image_fails_closed(self):
        """Test that a broken image clears the preview and records an error."""
        self.session.import_image(b"not really an image")
        self.assertIsNone(self.session.preview())
        self.assertEqual(self.session.last_error, "The image could not be displayed")
        with self.assertRaises(RenderError):
            self.session.export()

    def test_load_from_gallery_starts_new_history(self):
        """Test that a gallery entry seeds a new history root."""
        self._import_a()
        self.session.export()
        entry = self.session.gallery.entries()[0]
        self.session.commit(ImageState(make_png((0, 255, 0))))

        state = self.session.load_from_gallery(entry.id)

        self.assertEqual(self.session.history.entries(), [state])
        self.assertEqual(state.data, entry.image.data)
        self.assertEqual(state.source, "gallery")

    def test_remove_from_gallery(self):
        """Test deleting gallery entries."""
        self._import_a()
        entry = self.session.gallery.add(self.session.current())
        self.session.remove_from_gallery(entry.id)
        self.assertEqual(len(self.session.gallery), 0)
        with self.assertRaises(KeyError):
            self.session.remove_from_gallery(entry.id)

    def test_set_adjustments_and_reset(self):
        """Test replacing and resetting all sliders."""
        self.session.set_adjustments(ImageAdjustments(sepia=50))
        self.assertEqual(self.session.adjustments.sepia, 50)
        self.session.reset_adjustments()
        self.assertTrue(self.session.adjustments.is_baseline())

    def test_invalid_language(self):
        """Test that unsupported languages are rejected."""
        with self.assertRaises(ValueError):
            self.session.set_language('fr')
        self.assertEqual(self.session.t('undo'), 'Undo')


if __name__ == "__main__":
    unittest.main()
