from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Union

IMAGE = "image"
TEXT = "text"
GENERIC = "generic"
ERROR = "error"


@dataclass(frozen=True)
class ImagePreview:
    mime_type: str
    data: str  # base64
    thumbnail: Optional[str] = None  # never populated, no resizing yet
    kind: str = field(default=IMAGE, init=False)

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class TextPreview:
    content: str
    line_count: int
    encoding: str = "utf-8"
    truncated: bool = False
    kind: str = field(default=TEXT, init=False)


@dataclass(frozen=True)
class GenericPreview:
    """No inline preview; the UI should offer 'open with default program'."""
    note: str
    kind: str = field(default=GENERIC, init=False)


@dataclass(frozen=True)
class ErrorPreview:
    file_type: str
    reason: str
    kind: str = field(default=ERROR, init=False)


PreviewArtifact = Union[ImagePreview, TextPreview, GenericPreview, ErrorPreview]


class CacheKey(NamedTuple):
    path: str  # absolute
    mtime_ns: int


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    artifact: PreviewArtifact
    created_at: float


@dataclass(frozen=True)
class BackupInfo:
    name: str
    path: str
    modified_at: float


def artifact_summary(artifact: PreviewArtifact) -> dict:
    """
    Flattens an artifact into a JSON-friendly dict.
    Image payloads are reported by size only.
    """
    if isinstance(artifact, ImagePreview):
        return {"kind": artifact.kind, "mime_type": artifact.mime_type, "data_chars": len(artifact.data)}
    if isinstance(artifact, TextPreview):
        return {
            "kind": artifact.kind,
            "line_count": artifact.line_count,
            "encoding": artifact.encoding,
            "truncated": artifact.truncated,
            "content": artifact.content,
        }
    if isinstance(artifact, GenericPreview):
        return {"kind": artifact.kind, "note": artifact.note}
    if isinstance(artifact, ErrorPreview):
        return {"kind": artifact.kind, "file_type": artifact.file_type, "reason": artifact.reason}
    raise TypeError(f"Unknown preview artifact: {artifact!r}")
