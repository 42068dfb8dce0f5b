import os
import logging
from typing import Any, Dict, Optional

from filedesk.core.mime import normalize_extension
from filedesk.core.previewers.registry import PreviewerRegistry
from filedesk.models.previews import ErrorPreview, PreviewArtifact

logger = logging.getLogger(__name__)

class PreviewGenerator:
    """
    Dispatches a (path, declared type) pair to a format-specific previewer.
    Never raises: every failure comes back as an ErrorPreview. A missing path
    is an error for every type, including types whose previewer never opens
    the file (office documents, unknown extensions).
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, registry: Optional[PreviewerRegistry] = None):
        self.config = config or {}
        self.registry = registry or PreviewerRegistry(self.config)

    def generate(self, path: str, declared_type: str) -> PreviewArtifact:
        file_type = normalize_extension(declared_type)
        previewer = self.registry.get(file_type)

        try:
            os.stat(path)
            return previewer.preview(path, file_type)
        except FileNotFoundError:
            return ErrorPreview(file_type=file_type, reason=f"File not found: {path}")
        except PermissionError:
            return ErrorPreview(file_type=file_type, reason=f"Permission denied: {path}")
        except UnicodeDecodeError as e:
            logger.warning(f"Preview decode failed for {path}: {e}")
            return ErrorPreview(file_type=file_type, reason=f"File is not valid UTF-8 text: {e.reason}")
        except OSError as e:
            logger.warning(f"Preview read failed for {path}: {e}")
            return ErrorPreview(file_type=file_type, reason=f"Cannot read file: {e}")
        except Exception as e:
            logger.error(f"Preview generation failed for {path}: {e}", exc_info=True)
            return ErrorPreview(file_type=file_type, reason=f"Preview generation failed: {e}")
