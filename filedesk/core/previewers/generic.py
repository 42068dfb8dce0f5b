from filedesk.models.previews import GenericPreview
from .base import BasePreviewer

NO_PREVIEW_NOTE = "No inline preview available. Open the file with its default program."

class GenericPreviewer(BasePreviewer):
    def preview(self, path: str, file_type: str) -> GenericPreview:
        return GenericPreview(note=NO_PREVIEW_NOTE)
