from typing import Dict, Optional

from filedesk.core.mime import normalize_extension
from .base import BasePreviewer
from .document import DocumentPreviewer
from .generic import GenericPreviewer
from .image import ImagePreviewer
from .text import TextPreviewer

IMAGE_TYPES = ["jpg", "jpeg", "png", "gif", "bmp"]
TEXT_TYPES = ["txt", "log"]
DOCUMENT_TYPES = ["pdf", "doc", "docx", "xls", "xlsx"]

class PreviewerRegistry:
    def __init__(self, config: Optional[dict] = None):
        self._previewers: Dict[str, BasePreviewer] = {}
        self.config = config or {}
        self.fallback = GenericPreviewer(self.config)
        self.register_defaults()

    def register(self, file_type: str, previewer: BasePreviewer):
        self._previewers[normalize_extension(file_type)] = previewer

    def get(self, file_type: str) -> BasePreviewer:
        """Unregistered types resolve to the generic previewer."""
        return self._previewers.get(normalize_extension(file_type), self.fallback)

    def register_defaults(self):
        image = ImagePreviewer(self.config)
        for ext in IMAGE_TYPES:
            self.register(ext, image)

        text = TextPreviewer(self.config)
        for ext in TEXT_TYPES:
            self.register(ext, text)

        document = DocumentPreviewer(self.config.get("documents", {}))
        for ext in DOCUMENT_TYPES:
            self.register(ext, document)
