# app/services/image_staging.py - photos of the draft: persisted URLs and pending uploads in one list
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional
import uuid


class ImageSource(str, Enum):
    PERSISTED = "persisted"
    PENDING = "pending"


@dataclass
class PendingPhoto:
    """A locally selected file that has not been uploaded yet."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[1]


@dataclass
class StagedImage:
    source: ImageSource
    preview: str
    photo: Optional[PendingPhoto] = None

    @property
    def is_pending(self) -> bool:
        return self.source is ImageSource.PENDING


class ImageStagingBuffer:
    """Ordered preview slots; slot i and its pending file can never drift apart."""

    def __init__(self, preview_prefix: str = "blob:"):
        self.preview_prefix = preview_prefix
        self._entries: List[StagedImage] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StagedImage]:
        return iter(list(self._entries))

    def seed(self, urls: Iterable[str]):
        self._entries = [StagedImage(ImageSource.PERSISTED, url) for url in urls]

    def add_files(self, files: Iterable[PendingPhoto]) -> List[str]:
        added = []
        for photo in files:
            entry = StagedImage(ImageSource.PENDING, f"{self.preview_prefix}{uuid.uuid4().hex}", photo)
            self._entries.append(entry)
            added.append(entry.preview)
        return added

    def remove_at(self, index: int) -> StagedImage:
        if not 0 <= index < len(self._entries):
            raise IndexError(f"No image at position {index}")
        return self._entries.pop(index)

    def clear(self):
        self._entries = []

    @property
    def previews(self) -> List[str]:
        return [entry.preview for entry in self._entries]

    @property
    def retained_urls(self) -> List[str]:
        return [entry.preview for entry in self._entries if not entry.is_pending]

    @property
    def pending_photos(self) -> List[PendingPhoto]:
        return [entry.photo for entry in self._entries if entry.is_pending]

    def find_pending(self, token: str) -> Optional[PendingPhoto]:
        """Pending photo behind a preview reference or its bare token."""
        for entry in self._entries:
            if entry.is_pending and (entry.preview == token or entry.preview == f"{self.preview_prefix}{token}"):
                return entry.photo
        return None
