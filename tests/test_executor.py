"""Tests for the executor module."""

import unittest

import numpy as np

from lumina_studio import apply_adjustments
from lumina_studio.adjustments import ImageAdjustments
from lumina_studio.errors import RenderError
from lumina_studio.executor import PreviewRenderer, render_preview, to_css
from lumina_studio.history import ImageState
from lumina_studio.presets import get_preset
from lumina_studio.utils import image_to_bytes


class TestPreviewRenderer(unittest.TestCase):
    """Test cases for the PreviewRenderer class."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_image = np.zeros((20, 20, 3), dtype=np.uint8)
        self.test_image[:, :, :] = 100
        self.renderer = PreviewRenderer()

    def test_baseline_returns_copy(self):
        """Test that baseline adjustments return an unchanged copy."""
        result = self.renderer.render(self.test_image, ImageAdjustments.baseline())
        self.assertTrue(np.array_equal(result, self.test_image))
        self.assertIsNot(result, self.test_image)

    def test_input_not_mutated(self):
        """Test that rendering never modifies its input."""
        original = self.test_image.copy()
        self.renderer.render(self.test_image, get_preset("vintage").adjustments.with_value("blur", 3))
        self.assertTrue(np.array_equal(self.test_image, original))

    def test_brightness_scales_linearly(self):
        """Test that brightness 50% halves every channel."""
        image = np.full((4, 4, 3), 200, dtype=np.uint8)
        result = self.renderer.render(image, ImageAdjustments(brightness=50))
        self.assertTrue(np.all(np.abs(result.astype(int) - 100) <= 1))

    def test_contrast_zero_is_mid_gray(self):
        """Test that zero contrast collapses every pixel to mid gray."""
        image = np.random.RandomState(0).randint(0, 256, (8, 8, 3)).astype(np.uint8)
        result = self.renderer.render(image, ImageAdjustments(contrast=0))
        self.assertTrue(np.all(np.abs(result.astype(int) - 128) <= 1))

    def test_grayscale_equalizes_channels(self):
        """Test that full grayscale produces equal RGB channels."""
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :, 0] = 255
        result = self.renderer.render(image, ImageAdjustments(grayscale=100))
        self.assertTrue(np.all(np.abs(result[:, :, 0].astype(int) - result[:, :, 1]) <= 1))
        self.assertTrue(np.all(np.abs(result[:, :, 0].astype(int) - 54) <= 1))

    def test_zero_saturation_removes_color(self):
        """Test that saturation 0 produces gray pixels."""
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :, 1] = 200
        result = self.renderer.render(image, ImageAdjustments(saturation=0))
        self.assertLessEqual(int(result.max()) - int(result.min()), 1)

    def test_sepia_warms_white(self):
        """Test that full sepia turns white into a warm tone."""
        image = np.full((4, 4, 3), 255, dtype=np.uint8)
        result = self.renderer.render(image, ImageAdjustments(sepia=100))
        self.assertEqual(int(result[0, 0, 0]), 255)
        self.assertLess(int(result[0, 0, 2]), int(result[0, 0, 0]))

    def test_blur_smooths_edges(self):
        """Test that blur reduces local variation."""
        image = np.zeros((20, 20, 3), dtype=np.uint8)
        image[:, 10:] = 255
        result = self.renderer.render(image, ImageAdjustments(blur=3))
        self.assertLess(np.std(result.astype(float)), np.std(image.astype(float)))
        self.assertGreater(int(result[10, 9, 0]), 0)

    def test_filters_apply_in_fixed_order(self):
        """Test that brightness is applied before contrast."""
        result = self.renderer.render(self.test_image, ImageAdjustments(brightness=150, contrast=50))
        # brightness first: 100 -> 150 (0.588), then contrast 0.5 around mid gray -> ~139
        # contrast first would give ~171
        self.assertTrue(np.all(np.abs(result.astype(int) - 139) <= 1))

    def test_grayscale_input_is_expanded(self):
        """Test that single-channel arrays render as RGB."""
        image = np.full((4, 4), 100, dtype=np.uint8)
        result = self.renderer.render(image, ImageAdjustments(brightness=50))
        self.assertEqual(result.shape, (4, 4, 3))

    def test_alpha_channel_is_dropped(self):
        """Test that RGBA input always renders as RGB, with or without adjustments."""
        image = np.full((4, 4, 4), 100, dtype=np.uint8)
        for adjustments in (ImageAdjustments.baseline(), ImageAdjustments(sepia=50)):
            result = self.renderer.render(image, adjustments)
            self.assertEqual(result.shape, (4, 4, 3))
        self.assertTrue(np.array_equal(self.renderer.render(image, ImageAdjustments.baseline()), image[:, :, :3]))

    def test_apply_adjustments_preset_with_override(self):
        """Test the package-level helper: the preset applies first, then dict values override it."""
        image = np.full((4, 4, 3), 200, dtype=np.uint8)
        result = apply_adjustments(image, {"saturation": 100, "contrast": 100}, preset="dramatic")
        # only dramatic's brightness 80% is left
        self.assertTrue(np.all(np.abs(result.astype(int) - 160) <= 1))

        self.assertTrue(np.array_equal(apply_adjustments(image), image))
        with self.assertRaises(ValueError):
            apply_adjustments(image, preset="neon")

    def test_render_state(self):
        """Test rendering a committed image state."""
        state = ImageState(image_to_bytes(self.test_image, '.png'))
        result = render_preview(state, ImageAdjustments(grayscale=100))
        self.assertEqual(result.shape, (20, 20, 3))

    def test_render_state_fails_closed(self):
        """Test that undecodable data raises RenderError."""
        state = ImageState(b"this is not an image")
        with self.assertRaises(RenderError):
            self.renderer.render_state(state, ImageAdjustments.baseline())

    def test_to_css(self):
        """Test the CSS filter string for a preset."""
        css = to_css(get_preset("dramatic").adjustments)
        self.assertEqual(css, "brightness(80%) contrast(150%) saturate(0%) grayscale(0%) sepia(0%) blur(0px)")


if __name__ == "__main__":
    unittest.main()
