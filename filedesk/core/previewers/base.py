from abc import ABC, abstractmethod
from typing import Optional

from filedesk.models.previews import PreviewArtifact

class BasePreviewer(ABC):
    def __init__(self, config: Optional[dict] = None):
        self.config = config or {}

    @abstractmethod
    def preview(self, path: str, file_type: str) -> PreviewArtifact:
        """
        Build a preview artifact for the file.
        May raise OSError / UnicodeDecodeError; the generator turns those
        into error artifacts.
        """
        pass
