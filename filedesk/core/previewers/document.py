import logging

from docx import Document
from pypdf import PdfReader

from filedesk.models.previews import GenericPreview
from .base import BasePreviewer
from .generic import NO_PREVIEW_NOTE

logger = logging.getLogger(__name__)

LABELS = {
    "pdf": "PDF document",
    "doc": "Word document",
    "docx": "Word document",
    "xls": "Excel workbook",
    "xlsx": "Excel workbook",
}

class DocumentPreviewer(BasePreviewer):
    """
    Office/PDF documents are never rendered inline. When the document
    parses, the note carries a short size hint (pages / paragraphs).
    """

    def preview(self, path: str, file_type: str) -> GenericPreview:
        label = LABELS.get(file_type, "Document")
        detail = None

        try:
            if file_type == "pdf" and self.config.get("pdf", True):
                detail = f"{len(PdfReader(path).pages)} pages"
            elif file_type == "docx" and self.config.get("docx", True):
                detail = f"{len(Document(path).paragraphs)} paragraphs"
        except OSError:
            raise
        except Exception as e:
            # Corrupt or password-protected documents still get the plain note
            logger.debug(f"Could not inspect {path}: {e}")

        if detail:
            return GenericPreview(note=f"{label}, {detail}. {NO_PREVIEW_NOTE}")
        return GenericPreview(note=f"{label}. {NO_PREVIEW_NOTE}")
