"""Tests for renumber.core.config – environment-driven settings."""

from __future__ import annotations

import logging
from pathlib import Path

from renumber.core.config import AppConfig


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig.from_env({})
        assert config.data_dir == Path.home() / ".renumber"
        assert config.storage_key == "appState"
        assert config.log_level == logging.INFO

    def test_home_override(self, tmp_path: Path):
        config = AppConfig.from_env({"RENUMBER_HOME": str(tmp_path)})
        assert config.data_dir == tmp_path

    def test_log_level(self):
        assert AppConfig.from_env({"RENUMBER_LOG_LEVEL": "debug"}).log_level == logging.DEBUG

    def test_unknown_log_level_falls_back(self):
        assert AppConfig.from_env({"RENUMBER_LOG_LEVEL": "chatty"}).log_level == logging.INFO

    def test_reads_os_environ(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RENUMBER_HOME", str(tmp_path))
        assert AppConfig.from_env().data_dir == tmp_path
