"""
Minimal JSON-RPC 2.0 over HTTP POST for CKB light clients.
"""

from __future__ import annotations

import re

import requests

HEADERS = {"Content-Type": "application/json"}
MAX_U64 = 2**64 - 1
_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def build_payload(method: str) -> dict:
    return {"id": 1, "jsonrpc": "2.0", "method": method, "params": []}


def post(url: str, method: str, timeout: float) -> requests.Response:
    """
    Send one JSON-RPC request and return the raw response.
    Transport failures raise requests.exceptions.RequestException; the status is not checked here.
    """
    return requests.post(url, json=build_payload(method), headers=HEADERS, timeout=timeout)


def hex_to_u64(hex_val: str) -> int:
    """Parse an optionally 0x-prefixed hex string into an unsigned 64-bit integer."""
    s = hex_val[2:] if hex_val.startswith("0x") else hex_val
    if not _HEX_RE.fullmatch(s):
        raise ValueError(f"invalid hex number: {hex_val!r}")
    value = int(s, 16)
    if value > MAX_U64:
        raise ValueError(f"number too large to fit in u64: {hex_val!r}")
    return value
