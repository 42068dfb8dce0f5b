import base64

from filedesk.core.mime import resolve_mime_type
from filedesk.models.previews import ImagePreview
from .base import BasePreviewer

class ImagePreviewer(BasePreviewer):
    def preview(self, path: str, file_type: str) -> ImagePreview:
        with open(path, "rb") as f:
            raw = f.read()
        return ImagePreview(
            mime_type=resolve_mime_type(file_type),
            data=base64.b64encode(raw).decode("ascii"),
        )
