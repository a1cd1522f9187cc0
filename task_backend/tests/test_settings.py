import json
import logging

from src.api.generate_openapi import generate_openapi
from src.api.logging_setup import setup_logging
from src.api.settings import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PORT", "HOST", "CORS_ALLOW_ORIGINS", "API_KEY", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.port == 3001
        assert s.host == "0.0.0.0"
        assert s.cors_allow_origins == ["*"]
        assert s.api_key == "demo-key-12345"
        assert s.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("API_KEY", "other")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = get_settings()
        assert s.port == 8080
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.api_key == "other"
        assert s.log_level == "DEBUG"

    def test_invalid_port_falls_back(self, monkeypatch):
        for value in ("abc", "0", "70000"):
            monkeypatch.setenv("PORT", value)
            assert get_settings().port == 3001


class TestLoggingSetup:
    def test_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("debug")
            setup_logging("DEBUG")
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
            logging.captureWarnings(False)


class TestGenerateOpenapi:
    def test_writes_schema(self, tmp_path):
        out = tmp_path / "interfaces" / "openapi.json"
        path = generate_openapi(str(out))
        assert path == str(out)
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert schema["info"]["title"] == "Demo Task Manager API"
        assert "/api/tasks" in schema["paths"]
        assert "/api/tasks/{task_id}/toggle" in schema["paths"]
        assert "/api/protected/stats" in schema["paths"]
        assert {t["name"] for t in schema["tags"]} >= {"meta", "tasks", "protected"}
        # the catch-all route is not documented
        assert "/{path}" not in schema["paths"]
