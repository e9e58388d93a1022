"""
Tests for structured logging setup.
"""

import json
import logging

import pytest

from planemesh.core.logging import configure_logging, get_logger


@pytest.fixture
def log_file(temp_dir):
    path = temp_dir / "planemesh.log"
    yield path
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)


def read_lines(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level(self, log_file):
        configure_logging(level="warning", log_file=str(log_file))
        assert logging.root.level == logging.WARNING
        assert len(logging.root.handlers) == 2

    def test_unknown_level_falls_back_to_info(self, log_file):
        configure_logging(level="chatty", log_file=str(log_file))
        assert logging.root.level == logging.INFO

    def test_stdlib_records_rendered_as_json(self, log_file):
        configure_logging(level="DEBUG", json_output=True, log_file=str(log_file))
        logging.getLogger("planemesh.mesh").info("Split face %d", 3)

        entry = read_lines(log_file)[-1]
        assert entry["event"] == "Split face 3"
        assert entry["level"] == "info"
        assert entry["logger"] == "planemesh.mesh"
        assert "timestamp" in entry

    def test_structlog_key_values(self, log_file):
        configure_logging(level="DEBUG", json_output=True, log_file=str(log_file))
        get_logger("planemesh.cli").info("mesh_converted", faces=4)

        entry = read_lines(log_file)[-1]
        assert entry["event"] == "mesh_converted"
        assert entry["faces"] == 4
