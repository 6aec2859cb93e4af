"""
Selection State - the ordered list of images waiting to be bundled.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple, Union

from .exceptions import UnsupportedImageError
from .models import SelectedImageEntry

logger = logging.getLogger(__name__)

ACCEPTED_TYPES: Dict[str, Tuple[str, ...]] = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
}


def is_supported_image(filename: str) -> bool:
    """Check the file extension against the accepted image types."""
    suffix = Path(filename).suffix.lower()
    return any(suffix in extensions for extensions in ACCEPTED_TYPES.values())


@dataclass
class ImageSelection:
    """Ordered, user-editable collection of selected images."""

    entries: List[SelectedImageEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SelectedImageEntry]:
        return iter(self.snapshot())

    @property
    def total_size_mb(self) -> float:
        return sum(entry.size_mb for entry in self.entries)

    def add(self, raw_bytes: bytes, name: str) -> SelectedImageEntry:
        """
        Append an image to the selection.

        Raises:
            UnsupportedImageError: If the name is not a JPEG or PNG file
        """
        if not is_supported_image(name):
            raise UnsupportedImageError(
                f"Unsupported file type: {name} (accepted: .jpg, .jpeg, .png)"
            )

        entry = SelectedImageEntry(
            raw_bytes=raw_bytes, original_name=name, index=len(self.entries)
        )
        self.entries.append(entry)
        logger.info(f"Added {name} ({entry.size_mb:.2f} MB) at position {entry.index}")
        return entry

    def add_file(self, path: Union[str, Path]) -> SelectedImageEntry:
        """Read a file from disk and append it to the selection."""
        path = Path(path)
        if not is_supported_image(path.name):
            raise UnsupportedImageError(
                f"Unsupported file type: {path.name} (accepted: .jpg, .jpeg, .png)"
            )
        return self.add(path.read_bytes(), path.name)

    def add_files(self, paths: Iterable[Union[str, Path]]) -> List[SelectedImageEntry]:
        """Append several files in order, skipping any that are rejected."""
        added: List[SelectedImageEntry] = []
        for path in paths:
            try:
                added.append(self.add_file(path))
            except UnsupportedImageError as e:
                logger.warning(f"Skipping {path}: {e}")
            except OSError as e:
                logger.warning(f"Skipping {path}: could not read file: {e}")
        return added

    def remove(self, index: int) -> SelectedImageEntry:
        """Remove the entry at index; later entries are renumbered."""
        if index < 0 or index >= len(self.entries):
            raise IndexError(f"No selected image at position {index}")

        removed = self.entries[index]
        remaining = self.entries[:index] + self.entries[index + 1:]
        self.entries = [
            entry if entry.index == position else entry.model_copy(update={"index": position})
            for position, entry in enumerate(remaining)
        ]
        logger.info(f"Removed {removed.original_name} from position {index}")
        return removed

    def clear(self) -> None:
        self.entries = []

    def snapshot(self) -> Tuple[SelectedImageEntry, ...]:
        """Immutable copy of the current selection, in order."""
        return tuple(self.entries)
