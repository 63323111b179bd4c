"""Preset filters for the Lumina Studio editor.

This module defines the named adjustment bundles offered in the Filters panel.
"""

import logging
from typing import Any, Dict, List

from .adjustments import ImageAdjustments

logger = logging.getLogger(__name__)


class PresetFilter:
    """A named, immutable bundle of adjustment values."""

    def __init__(self, id: str, name_key: str, adjustments: ImageAdjustments):
        """Initialize a preset filter.

        Args:
            id: Identifier used for lookup (e.g. "dramatic")
            name_key: Translation key for the display name
            adjustments: The adjustment values applied by this preset
        """
        self.id = id
        self.name_key = name_key
        self.adjustments = adjustments

    def to_dict(self) -> Dict[str, Any]:
        """Convert the preset to a dictionary."""
        return {
            "id": self.id,
            "name_key": self.name_key,
            "adjustments": self.adjustments.to_dict()
        }

    def __repr__(self):
        return f"PresetFilter(id={self.id!r}, adjustments={self.adjustments!r})"


_BASE = ImageAdjustments.baseline()

# Preset order matches the Filters panel.
PRESET_FILTERS = {
    "original": PresetFilter(
        id="original",
        name_key="original",
        adjustments=_BASE,
    ),
    "vintage": PresetFilter(
        id="vintage",
        name_key="vintage",
        adjustments=_BASE.with_values(sepia=40, contrast=110, brightness=90, saturation=80),
    ),
    "bw": PresetFilter(
        id="bw",
        name_key="grayscale",
        adjustments=_BASE.with_values(grayscale=100, contrast=120),
    ),
    "movie": PresetFilter(
        id="movie",
        name_key="movie",
        adjustments=_BASE.with_values(contrast=130, saturation=110, brightness=95),
    ),
    "dramatic": PresetFilter(
        id="dramatic",
        name_key="dramatic",
        adjustments=_BASE.with_values(contrast=150, saturation=0, brightness=80),
    ),
}


def get_preset(preset_id: str) -> PresetFilter:
    """Get a preset filter by id.

    Args:
        preset_id: The preset id; case and surrounding spaces are ignored

    Returns:
        The preset filter

    Raises:
        ValueError: If the preset is not found
    """
    normalized_id = preset_id.strip().lower().replace(' ', '-')

    if normalized_id in PRESET_FILTERS:
        return PRESET_FILTERS[normalized_id]
    raise ValueError(f"Preset filter '{preset_id}' not found")


def get_available_presets() -> List[str]:
    """Get the available preset ids in display order."""
    return list(PRESET_FILTERS.keys())


def get_presets() -> List[PresetFilter]:
    """Get all preset filters in display order."""
    return list(PRESET_FILTERS.values())
