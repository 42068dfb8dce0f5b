from pathlib import Path

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "txt": "text/plain",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def normalize_extension(extension: str) -> str:
    return (extension or "").strip().lstrip(".").lower()


def resolve_mime_type(extension: str) -> str:
    """
    Maps an extension ("png", ".PNG") to its MIME type.
    Unknown extensions fall back to application/octet-stream.
    """
    return MIME_TYPES.get(normalize_extension(extension), DEFAULT_MIME_TYPE)


def mime_type_for_path(path: str) -> str:
    return resolve_mime_type(Path(path).suffix)
