"""Adjustment parameters for the Lumina Studio editor.

This module defines the six slider values applied to the preview and the
fixed order in which the renderer applies them.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

# name -> (minimum, maximum, baseline)
ADJUSTMENT_RANGES: Dict[str, Tuple[float, float, float]] = {
    "brightness": (0, 200, 100),
    "contrast": (0, 200, 100),
    "saturation": (0, 200, 100),
    "grayscale": (0, 100, 0),
    "sepia": (0, 100, 0),
    "blur": (0, 20, 0),
}

# Renderer operation name for each slider, in application order.
FILTER_ORDER: List[Tuple[str, str]] = [
    ("brightness", "brightness"),
    ("contrast", "contrast"),
    ("saturation", "saturate"),
    ("grayscale", "grayscale"),
    ("sepia", "sepia"),
    ("blur", "blur"),
]


@dataclass(frozen=True)
class FilterOperation:
    """A single named filter step in the preview chain."""

    name: str
    amount: float

    def is_identity(self) -> bool:
        """Check whether this step leaves pixels unchanged."""
        if self.name in ("brightness", "contrast", "saturate"):
            return self.amount == 100
        return self.amount == 0


class ImageAdjustments:
    """Transient slider values for the active editing session.

    Instances are immutable; ``with_value`` and ``with_values`` return copies.
    """

    __slots__ = tuple(ADJUSTMENT_RANGES)

    def __init__(self, brightness: float = 100, contrast: float = 100, saturation: float = 100,
                 grayscale: float = 0, sepia: float = 0, blur: float = 0):
        values = {
            "brightness": brightness,
            "contrast": contrast,
            "saturation": saturation,
            "grayscale": grayscale,
            "sepia": sepia,
            "blur": blur,
        }
        for name, value in values.items():
            object.__setattr__(self, name, clamp_value(name, value))

    def __setattr__(self, name, value):
        raise AttributeError("ImageAdjustments is immutable; use with_value()")

    @classmethod
    def baseline(cls) -> 'ImageAdjustments':
        """Create adjustments at their baseline (no visible change)."""
        return cls()

    def with_value(self, name: str, value: float) -> 'ImageAdjustments':
        """Return a copy with a single slider changed (clamped to its range)."""
        return self.with_values(**{name: value})

    def with_values(self, **values: float) -> 'ImageAdjustments':
        """Return a copy with several sliders changed."""
        data = self.to_dict()
        for name, value in values.items():
            if name not in ADJUSTMENT_RANGES:
                raise ValueError(f"Unknown adjustment parameter: {name}")
            data[name] = value
        return ImageAdjustments(**data)

    def is_baseline(self) -> bool:
        """Check whether every slider is at its baseline value."""
        return self == ImageAdjustments.baseline()

    def filter_chain(self) -> List[FilterOperation]:
        """Get the ordered filter operations for these adjustments.

        The order is brightness, contrast, saturate, grayscale, sepia, blur.
        """
        return [FilterOperation(op_name, getattr(self, field)) for field, op_name in FILTER_ORDER]

    def to_dict(self) -> Dict[str, float]:
        """Convert the adjustments to a dictionary."""
        return {name: getattr(self, name) for name in ADJUSTMENT_RANGES}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageAdjustments':
        """Create adjustments from a dictionary, filling missing keys from the baseline."""
        unknown = set(data) - set(ADJUSTMENT_RANGES)
        if unknown:
            raise ValueError(f"Unknown adjustment parameter(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def __eq__(self, other):
        if not isinstance(other, ImageAdjustments):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(self.to_dict().values()))

    def __repr__(self):
        values = ", ".join(f"{k}={v:g}" for k, v in self.to_dict().items())
        return f"ImageAdjustments({values})"


def clamp_value(name: str, value: float) -> float:
    """Clamp a slider value to its allowed range.

    Raises:
        ValueError: If the parameter name is unknown or the value is not a finite number
    """
    if name not in ADJUSTMENT_RANGES:
        raise ValueError(f"Unknown adjustment parameter: {name}")
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Adjustment '{name}' must be numeric, got {value!r}") from e
    if not math.isfinite(value):
        raise ValueError(f"Adjustment '{name}' must be finite, got {value!r}")

    minimum, maximum, _ = ADJUSTMENT_RANGES[name]
    if value < minimum or value > maximum:
        logger.debug(f"Clamping {name}={value} to [{minimum}, {maximum}]")
    return min(max(value, minimum), maximum)


DEFAULT_ADJUSTMENTS = ImageAdjustments.baseline()
