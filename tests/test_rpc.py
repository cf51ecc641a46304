from __future__ import annotations

import pytest

from ckb_monitor import rpc


def test_payload_shape():
    assert rpc.build_payload("get_peers") == {"id": 1, "jsonrpc": "2.0", "method": "get_peers", "params": []}


def test_post_sends_json_with_timeout(monkeypatch):
    seen = {}

    def fake_post(url, json, headers, timeout):
        seen.update(url=url, json=json, headers=headers, timeout=timeout)
        return "response"

    monkeypatch.setattr(rpc.requests, "post", fake_post)
    assert rpc.post("http://127.0.0.1:19003/", "get_tip_header", 1.5) == "response"
    assert seen["url"] == "http://127.0.0.1:19003/"
    assert seen["json"]["method"] == "get_tip_header"
    assert seen["headers"] == {"Content-Type": "application/json"}
    assert seen["timeout"] == 1.5


@pytest.mark.parametrize("value,expected", [("0x2a", 42), ("2a", 42), ("0xDEADbeef", 0xDEADBEEF), ("0x00", 0)])
def test_hex_to_u64(value, expected):
    assert rpc.hex_to_u64(value) == expected


@pytest.mark.parametrize("value", ["0xZZ", "", "0x", "-0x1", "+2a", "0x1_000", "0x10000000000000000"])
def test_hex_to_u64_rejects(value):
    with pytest.raises(ValueError):
        rpc.hex_to_u64(value)
