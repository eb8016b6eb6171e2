"""Shared test fixtures for munimcp.

Provides the sample MUNI API payloads, a recording stub of the upstream API
built on :class:`httpx.MockTransport`, environment isolation, and output
state management.  These fixtures are discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from munimcp.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_URL = "https://muni.test"
AGENCY = "/v2.0/riders/agencies/sfmta-cis"


class UpstreamStub:
    """Fake MUNI API answering from a path -> (status, body) table.

    Every request is recorded so tests can assert on call counts, paths and
    headers.  Unknown paths answer 404.
    """

    def __init__(self) -> None:
        self.responses: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Optional[Exception] = None

    def add(self, path: str, body: Any, status_code: int = 200) -> None:
        self.responses[path] = (status_code, body)

    def fail_with(self, exc: Exception) -> None:
        self.error = exc

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def calls_to(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status, body = self.responses.get(request.url.path, (404, {"error": "not found"}))
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet OutputManager and drop it after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; Typer's CliRunner swaps those streams, so a manager kept
    across tests would write to closed files.
    """
    set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
    yield
    reset_output()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear every MUNI_* variable so the host environment never leaks in."""
    for var in [
        "MUNI_API_BASE_URL",
        "MUNI_API_KEY",
        "MUNI_CACHE_TTL",
        "MUNI_CACHE_DISABLED",
    ]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Sample payloads (plain JSON loaded from files)
# ---------------------------------------------------------------------------


def _load(name: str) -> Any:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def routes_payload() -> list[dict[str, Any]]:
    """Two-route list: N-Judah then J-Church."""
    return _load("routes.json")


@pytest.fixture
def route_details_payload() -> dict[str, Any]:
    """Route N with two stops, one direction and one path."""
    return _load("route_details.json")


@pytest.fixture
def predictions_payload() -> list[dict[str, Any]]:
    """One envelope holding a single inbound prediction for vehicle 1234."""
    return _load("predictions.json")


# ---------------------------------------------------------------------------
# Upstream stub
# ---------------------------------------------------------------------------


@pytest.fixture
def upstream(
    routes_payload: list[dict[str, Any]],
    route_details_payload: dict[str, Any],
    predictions_payload: list[dict[str, Any]],
) -> UpstreamStub:
    """Upstream stub preloaded with the sample payloads."""
    stub = UpstreamStub()
    stub.add(f"{AGENCY}/routes", routes_payload)
    stub.add(f"{AGENCY}/routes/N", route_details_payload)
    stub.add(f"{AGENCY}/nstops/N:1234/predictions", predictions_payload)
    return stub


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
