"""Tests for the Typer CLI: query commands, config show, serve and main()."""

from __future__ import annotations

import json
import sys

import pytest

from conftest import BASE_URL, UpstreamStub
from munimcp import __version__
from munimcp.app import app, main
from munimcp.client import SyncMuniClient
from munimcp.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE, EXIT_UPSTREAM_STATUS
from munimcp.models import ServerConfig


@pytest.fixture
def stubbed_client(monkeypatch: pytest.MonkeyPatch, upstream: UpstreamStub) -> UpstreamStub:
    """Route every SyncMuniClient built by the query commands to the stub."""
    built: list[SyncMuniClient] = []

    def factory(base_url, api_key=None, config=None):
        client = SyncMuniClient(base_url, api_key=api_key, config=config, transport=upstream.transport())
        built.append(client)
        return client

    monkeypatch.setattr("munimcp.commands.query.SyncMuniClient", factory)
    upstream.built = built
    return upstream


class TestVersion:
    def test_version_flag(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"muni-mcp {__version__}" in result.stdout


class TestQueryCommands:
    def test_routes_json(self, cli_runner, stubbed_client, routes_payload) -> None:
        result = cli_runner.invoke(app, ["--base-url", BASE_URL, "--json", "-q", "routes"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == routes_payload

    def test_routes_plain_table(self, cli_runner, stubbed_client) -> None:
        result = cli_runner.invoke(app, ["--base-url", BASE_URL, "--plain", "-q", "routes"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "id\ttitle\tdescription\tcolor"
        assert lines[1].startswith("N\tN-Judah\t")
        assert lines[2].startswith("J\tJ-Church\t")

    def test_route_details(self, cli_runner, stubbed_client) -> None:
        result = cli_runner.invoke(app, ["--base-url", BASE_URL, "--json", "-q", "route", "N"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["id"] == "N"
        assert "code" not in data["stops"][0]

    def test_predictions_json(self, cli_runner, stubbed_client) -> None:
        result = cli_runner.invoke(
            app, ["--base-url", BASE_URL, "--json", "-q", "predictions", "N", "1234"]
        )
        assert result.exit_code == 0, result.output
        (prediction,) = json.loads(result.stdout)
        assert prediction["vehicle_id"] == "1234"
        assert prediction["timestamp"] == "2024-03-20T12:00:00Z"

    def test_flags_reach_client(self, cli_runner, stubbed_client) -> None:
        result = cli_runner.invoke(
            app,
            ["--base-url", BASE_URL + "/", "--api-key", "k", "--cache-ttl", "1m", "--no-cache", "-q", "--json", "routes"],
        )
        assert result.exit_code == 0, result.output
        (client,) = stubbed_client.built
        assert client.base_url == BASE_URL
        assert client.api_key == "k"
        assert client.cache.ttl == 60
        assert client.cache.is_enabled is False

    def test_env_base_url(self, cli_runner, stubbed_client, monkeypatch) -> None:
        monkeypatch.setenv("MUNI_API_BASE_URL", BASE_URL)
        result = cli_runner.invoke(app, ["--json", "-q", "routes"])
        assert result.exit_code == 0, result.output
        assert str(stubbed_client.requests[0].url).startswith(BASE_URL)


class TestConfigShow:
    def test_defaults(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--json", "config", "show"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["base_url"] == "https://api.prd-1.iq.live.umoiq.com"
        assert data["api_key"] is None
        assert data["cache"] == {"enabled": True, "ttl_seconds": 300.0}

    def test_api_key_masked(self, cli_runner, monkeypatch) -> None:
        monkeypatch.setenv("MUNI_API_KEY", "secret-key-1234")
        result = cli_runner.invoke(app, ["--json", "config", "show"])
        data = json.loads(result.stdout)
        assert data["api_key"] == "***********1234"
        assert "secret" not in result.stdout

    def test_short_key_fully_masked(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--api-key", "abc", "--json", "config", "show"])
        assert json.loads(result.stdout)["api_key"] == "****"


class TestServe:
    def test_serve_runs_with_resolved_config(self, cli_runner, monkeypatch) -> None:
        seen: list[ServerConfig] = []
        monkeypatch.setattr("munimcp.server.run", seen.append)
        monkeypatch.setenv("MUNI_CACHE_TTL", "45s")

        result = cli_runner.invoke(app, ["--base-url", BASE_URL, "serve"])
        assert result.exit_code == 0, result.output
        (config,) = seen
        assert config.base_url == BASE_URL
        assert config.cache.ttl_seconds == 45
        assert config.cache.enabled is True


class TestMainExitCodes:
    def _run_main(self, monkeypatch, argv: list[str]) -> int:
        monkeypatch.setattr(sys, "argv", ["muni-mcp", *argv])
        with pytest.raises(SystemExit) as exc_info:
            main()
        return exc_info.value.code

    def test_upstream_status(self, monkeypatch, capsys, stubbed_client) -> None:
        code = self._run_main(monkeypatch, ["--base-url", BASE_URL, "--no-color", "route", "ZZ"])
        assert code == EXIT_UPSTREAM_STATUS
        assert "unexpected status code: 404" in capsys.readouterr().err

    def test_missing_route_id(self, monkeypatch, capsys, stubbed_client) -> None:
        code = self._run_main(monkeypatch, ["--base-url", BASE_URL, "--no-color", "route", ""])
        assert code == EXIT_INVALID_USAGE
        assert "route ID is required" in capsys.readouterr().err
        assert stubbed_client.call_count == 0

    def test_bad_cache_ttl_flag(self, monkeypatch, capsys) -> None:
        code = self._run_main(monkeypatch, ["--cache-ttl", "soon", "--no-color", "config", "show"])
        assert code == EXIT_GENERIC_FAILURE
        assert "--cache-ttl" in capsys.readouterr().err

    def test_success_exits_zero(self, monkeypatch, capsys, stubbed_client) -> None:
        code = self._run_main(monkeypatch, ["--base-url", BASE_URL, "-q", "--json", "routes"])
        assert code in (0, None)
