"""Edit history for the Lumina Studio editor.

The history is an append-only sequence of committed image states with a
movable cursor:

- Committing while the cursor is behind the end discards every later entry
  before appending (branch-on-write truncation)
- Undo/redo only move the cursor; at a boundary they are no-ops
- Reset moves the cursor back to the root and keeps later entries for redo
"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional

import numpy as np

from .utils import (
    DEFAULT_MIME_TYPE,
    decode_data_url,
    decode_image,
    encode_data_url,
    image_to_bytes,
    sniff_mime_type,
)

logger = logging.getLogger(__name__)


class ImageState:
    """An immutable encoded image committed to history or the gallery."""

    __slots__ = ("data", "mime_type", "id", "timestamp", "source")

    def __init__(self, data: bytes, mime_type: Optional[str] = None, source: str = "upload",
                 id: Optional[str] = None, timestamp: Optional[float] = None):
        """Initialize an image state.

        Args:
            data: Encoded image bytes
            mime_type: MIME type of the data; sniffed from the bytes when omitted
            source: Where the image came from ("upload", "ai-edit", "gallery", "export")
            id: Unique identifier; generated when omitted
            timestamp: Creation time in epoch seconds; now when omitted
        """
        if not data:
            raise ValueError("Image state requires non-empty image data")
        object.__setattr__(self, "data", bytes(data))
        object.__setattr__(self, "mime_type", mime_type or sniff_mime_type(data))
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "id", id or uuid.uuid4().hex)
        object.__setattr__(self, "timestamp", time.time() if timestamp is None else timestamp)

    def __setattr__(self, name, value):
        raise AttributeError("ImageState is immutable")

    @classmethod
    def from_data_url(cls, data_url: str, source: str = "upload") -> 'ImageState':
        """Create an image state from a base64 data URL."""
        data, mime_type = decode_data_url(data_url)
        return cls(data, mime_type=mime_type, source=source)

    @classmethod
    def from_array(cls, image: np.ndarray, source: str = "export", format: str = '.png') -> 'ImageState':
        """Encode an RGB numpy array into a new image state."""
        data = image_to_bytes(image, format)
        return cls(data, mime_type=sniff_mime_type(data), source=source)

    def to_data_url(self) -> str:
        """Render the image as a base64 data URL."""
        return encode_data_url(self.data, self.mime_type or DEFAULT_MIME_TYPE)

    def decode(self) -> np.ndarray:
        """Decode the image into an RGB numpy array."""
        return decode_image(self.data)

    def __eq__(self, other):
        if not isinstance(other, ImageState):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"ImageState(id={self.id[:8]}, source={self.source!r}, mime_type={self.mime_type!r}, size={len(self.data)})"


class EditHistory:
    """Array-plus-cursor undo/redo history of committed image states."""

    def __init__(self):
        self._entries: List[ImageState] = []
        self._cursor = -1

    @property
    def cursor(self) -> int:
        """Index of the active state, or -1 when the history is empty."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        """Check whether nothing has been committed yet."""
        return not self._entries

    def entries(self) -> List[ImageState]:
        """Get a copy of all committed states, oldest first."""
        return list(self._entries)

    def current(self) -> Optional[ImageState]:
        """Get the state at the cursor, or None if the history is empty."""
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def commit(self, state: ImageState) -> ImageState:
        """Commit a new state after the cursor.

        Entries after the cursor are discarded first, then ``state`` is
        appended and becomes current.

        Args:
            state: The image state to commit

        Returns:
            The committed state
        """
        if not isinstance(state, ImageState):
            raise TypeError(f"Expected ImageState, got {type(state).__name__}")

        discarded = len(self._entries) - (self._cursor + 1)
        if discarded:
            logger.debug(f"Discarding {discarded} forward history entries")
        del self._entries[self._cursor + 1:]

        self._entries.append(state)
        self._cursor = len(self._entries) - 1
        logger.info(f"Committed {state!r} at index {self._cursor}")
        return state

    def start(self, state: ImageState) -> ImageState:
        """Drop all entries and make ``state`` the root of a new history."""
        self.clear()
        return self.commit(state)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries = []
        self._cursor = -1

    def undo(self) -> bool:
        """Move the cursor back one entry.

        Returns:
            True if the cursor moved, False at the root (no-op)
        """
        if self._cursor <= 0:
            logger.debug("Nothing to undo")
            return False
        self._cursor -= 1
        return True

    def redo(self) -> bool:
        """Move the cursor forward one entry.

        Returns:
            True if the cursor moved, False at the last entry (no-op)
        """
        if self._cursor >= len(self._entries) - 1:
            logger.debug("Nothing to redo")
            return False
        self._cursor += 1
        return True

    def reset_to_root(self) -> bool:
        """Move the cursor to the first committed state, keeping later entries.

        Returns:
            True if the cursor moved
        """
        if not self._entries or self._cursor == 0:
            return False
        self._cursor = 0
        return True

    def can_undo(self) -> bool:
        """Check if undo is available"""
        return self._cursor > 0

    def can_redo(self) -> bool:
        """Check if redo is available"""
        return 0 <= self._cursor < len(self._entries) - 1

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about history usage.

        Returns:
            dict: Entry count, cursor position and undo/redo availability
        """
        return {
            'length': len(self._entries),
            'cursor': self._cursor,
            'undo_count': max(self._cursor, 0),
            'redo_count': len(self._entries) - self._cursor - 1 if self._entries else 0,
        }
