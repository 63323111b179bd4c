"""Gallery of images produced during an editing session.

The gallery has its own lifecycle: entries are added by exports and AI edits,
can be deleted by the user, and are never tracked by undo/redo.
"""

import logging
import time
import uuid
from typing import Iterator, List, Optional

from .history import ImageState

logger = logging.getLogger(__name__)


class GalleryEntry:
    """A produced image kept in the gallery."""

    def __init__(self, image: ImageState, id: Optional[str] = None, timestamp: Optional[float] = None):
        self.image = image
        self.id = id or uuid.uuid4().hex
        self.timestamp = time.time() if timestamp is None else timestamp

    def __repr__(self):
        return f"GalleryEntry(id={self.id[:8]}, image={self.image!r})"


class Gallery:
    """Newest-first list of gallery entries."""

    def __init__(self):
        self._entries: List[GalleryEntry] = []

    def add(self, image: ImageState) -> GalleryEntry:
        """Add an image to the front of the gallery."""
        entry = GalleryEntry(image)
        self._entries.insert(0, entry)
        logger.info(f"Added {entry!r} to gallery ({len(self._entries)} entries)")
        return entry

    def get(self, entry_id: str) -> GalleryEntry:
        """Get an entry by id.

        Raises:
            KeyError: If no entry has this id
        """
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise KeyError(f"Gallery entry '{entry_id}' not found")

    def remove(self, entry_id: str) -> GalleryEntry:
        """Delete an entry by id and return it.

        Raises:
            KeyError: If no entry has this id
        """
        entry = self.get(entry_id)
        self._entries.remove(entry)
        logger.info(f"Removed {entry!r} from gallery")
        return entry

    def clear(self) -> None:
        self._entries = []

    def entries(self) -> List[GalleryEntry]:
        """Get a copy of the entries, newest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GalleryEntry]:
        return iter(list(self._entries))
