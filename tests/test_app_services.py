import pytest
import yaml
from filedesk.core.config_loader import load_config
from filedesk.models.previews import TextPreview
from filedesk.services.app_services import build_services

@pytest.fixture
def config_file(tmp_path):
    cfg = tmp_path / "filedesk.yaml"
    cfg.write_text(yaml.dump({
        "paths": {"db_path": "filedesk.db", "backup_dir": "autosave", "logs_dir": "logs"},
        "preview": {"ttl_seconds": 120, "sweep_interval_seconds": 30, "text_limit": 5},
        "backup": {"interval_seconds": 60, "retention": 3},
    }))
    return cfg

def test_build_services_from_config(config_file, tmp_path):
    services = build_services(load_config(str(config_file)))

    assert (tmp_path / "filedesk.db").exists()
    assert services.preview_cache.ttl == 120
    assert services.preview_cache.sweep_interval == 30
    assert services.backup_rotator.retention == 3
    assert services.backup_rotator.interval == 60

    doc = tmp_path / "doc.txt"
    doc.write_text("abcdefgh", encoding="utf-8")
    res = services.preview_cache.get_or_generate(str(doc), "txt")
    assert isinstance(res, TextPreview)
    assert res.content == "abcde..."

    info = services.backup_rotator.perform_backup()
    assert info is not None
    assert info.path.startswith(str(tmp_path / "autosave"))

def test_start_and_shutdown(config_file):
    services = build_services(load_config(str(config_file)))

    services.start()
    assert services.preview_cache.is_sweeping
    assert services.backup_rotator.is_running

    services.shutdown()
    assert not services.preview_cache.is_sweeping
    assert not services.backup_rotator.is_running

def test_backups_can_be_disabled(tmp_path):
    cfg = tmp_path / "filedesk.yaml"
    cfg.write_text(yaml.dump({
        "paths": {"db_path": "filedesk.db", "backup_dir": "autosave", "logs_dir": "logs"},
        "backup": {"enabled": False},
    }))
    services = build_services(load_config(str(cfg)))

    services.start()
    try:
        assert not services.backup_rotator.is_running
    finally:
        services.shutdown()

def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        build_services({"status": "ERROR", "error": "broken"})
