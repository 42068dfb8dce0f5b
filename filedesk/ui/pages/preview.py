import streamlit as st
from pathlib import Path
from filedesk.ui.state import AppState
from filedesk.ui.components import preview_panel

def render(app_state: AppState):
    st.title("Preview")

    if "services_error" in app_state.config:
        st.error(f"Service Initialization Error: {app_state.config['services_error']}")
        return
    if app_state.services is None:
        st.warning(f"Configuration not loaded: {app_state.config.get('error')}")
        return

    cache = app_state.services.preview_cache
    path = st.text_input("File path", placeholder="/path/to/document.txt")
    if not path:
        st.info("Enter a file path to preview.")
        return

    default_type = Path(path).suffix.lstrip(".").lower()
    declared_type = st.text_input("Type", value=default_type)

    artifact = cache.get_or_generate(path, declared_type)
    preview_panel.render(artifact)

    with st.sidebar:
        st.subheader("Preview Cache")
        st.json(cache.stats())
