"""Binary request bodies tagged with their media type."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Blob:
    """Raw binary content (images, audio, video) plus its Content-Type."""

    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def media_type(self) -> str:
        """Content type without parameters, e.g. ``image/png``."""
        return self.content_type.split(";")[0].strip().lower()

    def __repr__(self) -> str:
        return f"Blob({self.media_type!r}, {self.size} bytes)"
