"""Tests for settings and logging bootstrap."""

import io
import json

import pytest
import structlog
from structlog.testing import capture_logs

from localstore.config import Settings, settings
from localstore.infrastructure.logging_setup import configure_logging, render_paths, reset_logging
from localstore.kernel.fs.filesystem import NATIVE_FILESYSTEM, WindowsFilesystem
from localstore.kernel.fs.path import POSIX_FLAVOR, Path, PathView
from localstore.kernel.lancedb.store_opener import TESTING_DIRECTORY_NAME, ClearingStoreOpener
from localstore.kernel.lancedb.schemas import STORE_INFO_TABLE


@pytest.fixture
def clean_logging():
    reset_logging()
    yield
    reset_logging()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOCALSTORE_LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOCALSTORE_LOG_JSON", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.testing_directory_name == TESTING_DIRECTORY_NAME

    def test_prefixed_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCALSTORE_LOG_LEVEL", "debug")
        monkeypatch.setenv("LOCALSTORE_LOG_JSON", "true")
        monkeypatch.setenv("LOCALSTORE_TEMP_DIR", str(tmp_path))
        monkeypatch.setenv("LOCALSTORE_TESTING_DIRECTORY_NAME", "scratch")

        settings = Settings(_env_file=None)

        assert settings.log_level == "debug"
        assert settings.log_json is True
        assert settings.temp_path == Path.from_native(tmp_path)
        assert settings.testing_directory_name == "scratch"

    def test_temp_dir_follows_platform_variable(self, monkeypatch, tmp_path):
        monkeypatch.delenv("LOCALSTORE_TEMP_DIR", raising=False)
        variable = "TMP" if isinstance(NATIVE_FILESYSTEM, WindowsFilesystem) else "TMPDIR"
        monkeypatch.setenv(variable, str(tmp_path))

        settings = Settings(_env_file=None)

        assert settings.temp_dir == str(tmp_path)


class TestTestingStoreSettings:
    def test_opener_uses_configured_location(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCALSTORE_TEMP_DIR", str(tmp_path))
        monkeypatch.setenv("LOCALSTORE_TESTING_DIRECTORY_NAME", "scratch")

        opener = Settings(_env_file=None).testing_store_opener()

        assert isinstance(opener, ClearingStoreOpener)
        assert opener.directory == Path.from_native(tmp_path) / "scratch"

    def test_open_testing_store(self, tmp_path):
        configured = Settings(_env_file=None, temp_dir=str(tmp_path), testing_directory_name="scratch")

        store = configured.open_testing_store()

        assert store.directory == Path.from_native(tmp_path) / "scratch"
        assert store.list_tables() == [STORE_INFO_TABLE]
        assert NATIVE_FILESYSTEM.dir_exists(store.directory)

    def test_module_settings_drive_the_opener(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "temp_dir", str(tmp_path))

        opener = settings.testing_store_opener()

        assert opener.directory == Path.from_native(tmp_path) / settings.testing_directory_name


class TestLogging:
    def test_configure_once(self, clean_logging):
        assert configure_logging(level="debug", json_logs=True) is True
        first = structlog.get_config()["processors"]
        assert configure_logging(level="info", json_logs=False) is False

        assert structlog.get_config()["processors"] is first
        assert isinstance(first[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_by_default(self, clean_logging):
        Settings(_env_file=None, log_json=False).setup_logging()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_filesystem_events(self, clean_logging, tmp_path):
        root = Path.from_native(tmp_path)
        with capture_logs() as logs:
            assert NATIVE_FILESYSTEM.create_dir(root / "made").ok
            assert NATIVE_FILESYSTEM.recursively_delete(root / "made").ok

        events = [entry["event"] for entry in logs]
        assert events == ["directory_created", "path_deleted"]
        assert logs[0]["log_level"] == "debug"

    def test_json_output_renders_paths(self, clean_logging):
        stream = io.StringIO()
        configure_logging(level="info", json_logs=True, stream=stream)

        structlog.get_logger().info("store_opened", directory=Path("/data/store", POSIX_FLAVOR))

        record = json.loads(stream.getvalue().strip())
        assert record["event"] == "store_opened"
        assert record["directory"] == "/data/store"
        assert record["level"] == "info"

    def test_level_filters_lower_events(self, clean_logging):
        stream = io.StringIO()
        configure_logging(level="warning", json_logs=True, stream=stream)

        structlog.get_logger().info("store_opened")

        assert stream.getvalue() == ""


def test_render_paths_leaves_other_values():
    event = {
        "event": "path_deleted",
        "path": Path("/a/b", POSIX_FLAVOR),
        "view": PathView("/a/b", flavor=POSIX_FLAVOR).dirname(),
        "count": 3,
    }
    assert render_paths(None, "info", event) == {
        "event": "path_deleted",
        "path": "/a/b",
        "view": "/a",
        "count": 3,
    }
