import logging
import streamlit as st
from typing import Optional
from filedesk.core.config_loader import load_config
from filedesk.core.logging_setup import configure_logging
from filedesk.services.app_services import AppServices, build_services

logger = logging.getLogger(__name__)

@st.cache_resource
def get_services(config_path: Optional[str]) -> dict:
    """
    Build and start services once per process.
    Keyed by config path so a changed config gets a fresh set.
    """
    config = load_config(config_path)
    if config["status"] != "OK":
        return {"status": "ERROR", "error": config["error"], "services": None}
    try:
        configure_logging(config.get("logs_dir"))
        services = build_services(config)
        services.start()
        return {"status": "OK", "error": None, "services": services}
    except Exception as e:
        logger.error(f"Service init failed: {e}", exc_info=True)
        return {"status": "ERROR", "error": str(e), "services": None}

class AppState:
    def __init__(self):
        # Load config only once per session
        if "app_config" not in st.session_state:
            st.session_state.app_config = load_config()

        self.config = st.session_state.app_config
        self._services_result = None

        if self.config.get("status") == "OK":
            self._services_result = get_services(self.config.get("config_path"))
            if self._services_result["status"] == "ERROR":
                self.config["services_error"] = self._services_result["error"]

    @property
    def env(self) -> str:
        return self.config.get("env", "UNKNOWN")

    @property
    def services(self) -> Optional[AppServices]:
        if not self._services_result:
            return None
        return self._services_result["services"]

def init_app_state() -> AppState:
    return AppState()
