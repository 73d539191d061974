"""
Tests for configuration loading and logging setup.
"""
import json
import logging

from channelframe.config import AppConfig, NeynarConfig, RenderConfig
from channelframe.utils.logging_config import StructuredFormatter, setup_logging


class TestAppConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NEYNAR_API_KEY", raising=False)
        config = AppConfig(_env_file=None)

        assert config.neynar.api_key == ""
        assert config.neynar.base_url == "https://api.neynar.com/v2"
        assert config.neynar.timeout == 10.0
        assert config.render.max_artwork_size == 670
        assert config.render.shift_up == 28.5
        assert config.render.shift_right == 0.1
        assert config.render.max_image_bytes == 10 * 1024 * 1024
        assert config.render.placeholder_url.endswith("landscape-placeholder.svg")

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("NEYNAR_API_KEY", "env_key")
        assert AppConfig(_env_file=None).neynar.api_key == "env_key"

    def test_render_overrides_from_environment(self, monkeypatch):
        monkeypatch.setenv("RENDER_TEMPLATE_PATH", "/srv/frame.png")
        monkeypatch.setenv("RENDER_IMAGE_TIMEOUT", "2.5")

        render = RenderConfig()
        assert render.template_path == "/srv/frame.png"
        assert render.image_timeout == 2.5

    def test_sections_read_dotenv(self, tmp_path, monkeypatch):
        for name in ("NEYNAR_API_KEY", "RENDER_TEMPLATE_PATH", "RENDER_MAX_IMAGE_BYTES", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        (tmp_path / ".env").write_text(
            "NEYNAR_API_KEY=from_dotenv\n"
            "RENDER_TEMPLATE_PATH=/srv/dotenv.png\n"
            "RENDER_MAX_IMAGE_BYTES=2048\n"
            "LOG_LEVEL=DEBUG\n",
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)

        config = AppConfig()

        assert config.log_level == "DEBUG"
        assert config.neynar.api_key == "from_dotenv"
        assert config.render.template_path == "/srv/dotenv.png"
        assert config.render.max_image_bytes == 2048

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("NEYNAR_API_KEY", "env_key")
        assert NeynarConfig(api_key="explicit").api_key == "explicit"


class TestLogging:

    def test_structured_formatter_adds_service_fields(self):
        formatter = StructuredFormatter("%(name)s %(levelname)s %(message)s")
        record = logging.LogRecord("channelframe.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello world"
        assert payload["service"] == "channelframe"
        assert "timestamp" in payload

    def test_setup_logging_sets_levels(self, tmp_path):
        log_file = tmp_path / "logs" / "channelframe.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(log_level="DEBUG", log_format="json", log_file=str(log_file))

            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
            assert log_file.parent.exists()
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)
