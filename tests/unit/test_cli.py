"""Tests for the typer CLI."""

import pytest
from typer.testing import CliRunner

from land_registry.cli import app
from land_registry.common.config import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def memory_db(monkeypatch):
    monkeypatch.setenv("LAND_REGISTRY_DB_URL", "sqlite+aiosqlite://")
    monkeypatch.setenv("LAND_REGISTRY_SECRET_KEY", "test-secret-key-for-unit-tests")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCli:
    def test_seed_users(self):
        result = runner.invoke(app, ["seed-users"])
        assert result.exit_code == 0, result.output
        assert "admin (admin)" in result.output
        assert "verifier (verifier)" in result.output

    def test_stats(self):
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 0, result.output
        assert "land count" in result.output

    def test_health_unreachable(self):
        result = runner.invoke(app, ["health", "--url", "http://127.0.0.1:9"])
        assert result.exit_code == 1
