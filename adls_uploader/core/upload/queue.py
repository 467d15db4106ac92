"""
Upload queue.

Holds the pending/uploading items in insertion order, keyed by file name,
and keeps the aggregate byte size in sync with every mutation.
"""
from typing import Iterable, List, Optional, Tuple

from .models import FileItem
from .protocols import LocalFileProtocol


class FileQueue:
    """
    Ordered collection of FileItem with unique file names.

    Responsibilities:
    - Reject duplicate names
    - Never drop an item that is currently uploading
    - Track the total size of queued files
    """

    def __init__(self):
        self._items: List[FileItem] = []
        self._size = 0

    @property
    def items(self) -> Tuple[FileItem, ...]:
        """Returns an immutable, ordered view of the queue."""
        return tuple(self._items)

    @property
    def size(self) -> int:
        """Returns the sum of file sizes over all queued items."""
        return self._size

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def find(self, name: str) -> Optional[FileItem]:
        """Find the item whose file has the given name."""
        for item in self._items:
            if item.file.name == name:
                return item
        return None

    def add_file(self, file: LocalFileProtocol) -> Optional[FileItem]:
        """
        Queue a file unless one with the same name is already queued.

        Args:
            file: Local file handle

        Returns:
            The new item, or None if the name was already queued
        """
        if self.find(file.name) is not None:
            return None
        item = FileItem(file=file)
        self._items.append(item)
        self._size += file.size
        return item

    def add_files(self, files: Iterable[LocalFileProtocol]) -> List[FileItem]:
        """Queue every file, preserving input order. Returns the items added."""
        added = []
        for file in files:
            item = self.add_file(file)
            if item is not None:
                added.append(item)
        return added

    def remove_file(self, file: LocalFileProtocol) -> bool:
        """
        Remove the item queued under the file's name.

        No-op if the name is not queued or the item is uploading.

        Returns:
            True if an item was removed
        """
        item = self.find(file.name)
        if item is None or item.is_uploading:
            return False
        self._items.remove(item)
        self._size -= item.file.size
        return True

    def remove_item(self, item: FileItem) -> bool:
        """Remove an item (delegates to remove_file)."""
        return self.remove_file(item.file)

    def clear(self) -> None:
        """Drop every item that is not uploading and recompute the size."""
        self._items = [item for item in self._items if item.is_uploading]
        self._size = sum(item.file.size for item in self._items)

    def uploading_item(self) -> Optional[FileItem]:
        """Returns the item currently being transferred, if any."""
        for item in self._items:
            if item.is_uploading:
                return item
        return None
