"""Fake light-client fleet: replaces requests.post so no test touches the network."""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from ckb_monitor import rpc


def FakeResponse(payload: Any = None, status_code: int = 200, text: str | None = None) -> requests.Response:
    """A real requests.Response with a canned body, so status and JSON handling match the library."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.encoding = "utf-8"
    resp._content = (text if text is not None else json.dumps(payload)).encode("utf-8")
    return resp


def ok(result: Any) -> requests.Response:
    return FakeResponse({"id": 1, "jsonrpc": "2.0", "result": result})


def refused() -> requests.exceptions.ConnectionError:
    return requests.exceptions.ConnectionError("Connection refused")


class FakeFleet:
    """Route table keyed by (port, method). A value may be a response, an exception, or a list consumed in order."""

    def __init__(self) -> None:
        self.routes: dict[tuple[int, str], Any] = {}
        self.calls: list[tuple[int, str]] = []

    def set(self, port: int, method: str, outcome: Any) -> None:
        self.routes[(port, method)] = outcome

    def healthy(self, port: int, peers: int, number: str) -> None:
        self.set(port, "local_node_info", ok({"version": "0.3.0"}))
        self.set(port, "get_peers", ok([{"node_id": f"peer-{i}"} for i in range(peers)]))
        self.set(port, "get_tip_header", ok({"number": number}))

    def down(self, port: int) -> None:
        for method in ("local_node_info", "get_peers", "get_tip_header"):
            self.set(port, method, refused())

    def post(self, url: str, json: dict, headers: dict, timeout: float) -> requests.Response:
        assert json["jsonrpc"] == "2.0" and json["id"] == 1 and json["params"] == []
        assert timeout > 0
        port = int(url.rstrip("/").rsplit(":", 1)[1])
        key = (port, json["method"])
        self.calls.append(key)
        outcome = self.routes.get(key, refused())
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fleet(monkeypatch: pytest.MonkeyPatch) -> FakeFleet:
    fake = FakeFleet()
    monkeypatch.setattr(rpc.requests, "post", fake.post)
    return fake
