import datetime
import streamlit as st
from filedesk.ui.state import AppState

def render(app_state: AppState):
    st.title("Backups")

    if app_state.services is None:
        st.warning("Services not available. Check configuration.")
        return

    rotator = app_state.services.backup_rotator
    st.metric("Auto-backup", "RUNNING" if rotator.is_running else "STOPPED")

    if st.button("Backup now", type="primary"):
        info = rotator.perform_backup()
        if info:
            st.success(f"Backup written: {info.name}")
        else:
            st.error("Backup failed, see log for details.")

    latest = rotator.get_latest_backup()
    if latest is None:
        st.info("No backups yet.")
        return

    st.subheader("Latest Backup")
    st.json({
        "Name": latest.name,
        "Path": latest.path,
        "Modified": datetime.datetime.fromtimestamp(latest.modified_at).isoformat(),
    })

    st.subheader("Retained Backups")
    for info in rotator.list_backups():
        st.text(info.name)
