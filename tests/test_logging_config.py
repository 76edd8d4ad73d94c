import json
import logging

from content_schema_drafter.config import load_settings
from content_schema_drafter.logging_config import StructuredFormatter, get_trace_id, set_trace_id


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("content_schema_drafter.test", logging.WARNING, __file__, 10, "Field fallback", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_emits_extra_and_trace():
    set_trace_id("projects/demo/traces/abc")
    try:
        payload = json.loads(StructuredFormatter().format(make_record(section="hero", field_kind="carousel")))
    finally:
        set_trace_id(None)

    assert payload["severity"] == "WARNING"
    assert payload["message"] == "Field fallback"
    assert payload["section"] == "hero"
    assert payload["field_kind"] == "carousel"
    assert payload["logging.googleapis.com/trace"] == "projects/demo/traces/abc"
    assert payload["timestamp"].endswith("Z")
    assert get_trace_id() is None


def test_load_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("PROJECT_ID", "demo")
    monkeypatch.setenv("FIELD_TYPES_REGISTRY_PATH", str(tmp_path / "registry.json"))
    monkeypatch.setenv("EXCLUDE_LAYOUT_SECTIONS", "false")

    settings = load_settings()

    assert settings.use_cloud_logging
    assert settings.registry_path == tmp_path / "registry.json"
    assert settings.exclude_layout_sections is False


def test_default_settings(monkeypatch):
    for name in ("ENVIRONMENT", "PROJECT_ID", "FIELD_TYPES_REGISTRY_PATH", "EXCLUDE_LAYOUT_SECTIONS"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.environment == "dev"
    assert not settings.use_cloud_logging
    assert settings.registry_path is None
    assert settings.exclude_layout_sections is True
