"""Tests for settings, options and logging setup."""

import json
import logging

import pytest
import structlog
from pydantic import ValidationError

from py_delaunay.config import Settings
from py_delaunay.core.triangulation import TriangulationOptions
from py_delaunay.utils import configure_logging


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for name in ("EPSILON", "INCIRCLE_TOLERANCE", "LOG_LEVEL", "VALIDATE_MESH"):
            monkeypatch.delenv(f"PY_DELAUNAY_{name}", raising=False)
        config = Settings()

        assert config.log_level == "INFO"
        assert config.log_format == "json"
        assert config.epsilon == 1e-12
        assert config.incircle_tolerance == 1e-12
        assert config.validate_mesh is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PY_DELAUNAY_EPSILON", "1e-9")
        monkeypatch.setenv("PY_DELAUNAY_VALIDATE_MESH", "true")
        config = Settings()

        assert config.epsilon == 1e-9
        assert config.validate_mesh is True

    @pytest.mark.parametrize("field,value", [
        ("epsilon", 0.0),
        ("duplicate_tolerance", -1.0),
        ("incircle_tolerance", 0.0),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestTriangulationOptions:
    """Test per-run options."""

    def test_from_settings(self):
        config = Settings(epsilon=1e-10, duplicate_tolerance=1e-8, validate_mesh=True)
        options = TriangulationOptions.from_settings(config)

        assert options.epsilon == 1e-10
        assert options.duplicate_tolerance == 1e-8
        assert options.validate_mesh is True
        assert options.incircle_tolerance == config.incircle_tolerance

    def test_defaults_match_settings(self):
        assert TriangulationOptions() == TriangulationOptions.from_settings(Settings())


class TestLogging:
    """Test structlog configuration."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_output(self, capsys):
        configure_logging(level="INFO", fmt="json")
        structlog.get_logger("py_delaunay.test").info("Triangulation complete", triangles=7)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Triangulation complete"
        assert record["triangles"] == 7
        assert record["level"] == "info"
        assert record["logger"] == "py_delaunay.test"

    def test_level_filter(self, capsys):
        configure_logging(level="WARNING", fmt="plain")
        logger = structlog.get_logger("py_delaunay.test")
        logger.info("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            configure_logging(fmt="xml")
