import streamlit as st
from filedesk.models.previews import (
    ErrorPreview,
    GenericPreview,
    ImagePreview,
    PreviewArtifact,
    TextPreview,
)

def render(artifact: PreviewArtifact):
    """
    Renders one preview artifact. Pure render component, no file access.
    """
    if isinstance(artifact, ImagePreview):
        st.image(artifact.data_url)
    elif isinstance(artifact, TextPreview):
        st.caption(f"{artifact.line_count} lines, {artifact.encoding}" + (" (truncated)" if artifact.truncated else ""))
        st.code(artifact.content, language=None)
    elif isinstance(artifact, GenericPreview):
        st.info(artifact.note)
    elif isinstance(artifact, ErrorPreview):
        st.error(f"Preview unavailable ({artifact.file_type or 'unknown type'}): {artifact.reason}")
    else:
        raise TypeError(f"Unknown preview artifact: {artifact!r}")
