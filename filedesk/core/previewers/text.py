from filedesk.models.previews import TextPreview
from .base import BasePreviewer

DEFAULT_TEXT_LIMIT = 10000  # Characters
TRUNCATION_MARKER = "..."

class TextPreviewer(BasePreviewer):
    def preview(self, path: str, file_type: str) -> TextPreview:
        limit = self.config.get("text_limit", DEFAULT_TEXT_LIMIT)

        # Strict decoding; newline="" keeps \r\n and lone \r as they are on disk
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()

        truncated = len(content) > limit
        if truncated:
            content = content[:limit]

        line_count = content.count("\n") + 1
        if truncated:
            content += TRUNCATION_MARKER

        return TextPreview(
            content=content,
            line_count=line_count,
            encoding="utf-8",
            truncated=truncated,
        )
