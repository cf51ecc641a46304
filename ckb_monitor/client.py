"""
A single monitored CKB light client and its per-cycle health checks.
"""

from __future__ import annotations

import logging
import time

import requests

from ckb_monitor import rpc

logger = logging.getLogger(__name__)


class Client:
    """State of one light client. Checks mutate it in place; remote failures are logged, never raised."""

    def __init__(self, number: int, host: str, port: int, timeout: float = 2):
        self.number = number
        self.port = port
        self.url = f"{host}:{port}/"
        self.timeout = timeout
        self.is_online = True
        self.block_number = 0
        self.peers = 0
        self.offline_since: float | None = None

    def __repr__(self) -> str:
        state = "online" if self.is_online else "offline"
        return f"<Client {self.number} {self.url} {state} block={self.block_number} peers={self.peers}>"

    def _go_online(self) -> None:
        offline_for = max(0, int(time.time() - self.offline_since)) if self.offline_since is not None else 0
        logger.info("Client %d is now online. (Offline %s seconds.)", self.number, f"{offline_for:,}")
        self.is_online = True
        self.offline_since = None

    def _go_offline(self) -> None:
        self.is_online = False
        self.offline_since = time.time()
        self.peers = 0
        self.block_number = 0

    def check_rpc(self) -> None:
        """Check that the RPC server answers local_node_info; flips online/offline on change only."""
        try:
            resp = rpc.post(self.url, "local_node_info", self.timeout)
        except requests.exceptions.RequestException as e:
            if self.is_online:
                logger.error("Client %d did not respond: %s", self.number, e)
                self._go_offline()
            return

        if 200 <= resp.status_code < 300:
            if not self.is_online:
                self._go_online()
        elif self.is_online:
            logger.error("Client %d gave an error response.", self.number)
            self._go_offline()

    def check_peers(self) -> None:
        if not self.is_online:
            return

        try:
            resp = rpc.post(self.url, "get_peers", self.timeout)
        except requests.exceptions.RequestException:
            logger.error("Client %d did not respond to the peer request.", self.number)
            return

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Client %d failed to parse JSON response: %s", self.number, e)
            return

        peers = data.get("result") if isinstance(data, dict) else None
        if not isinstance(peers, list):
            logger.error(
                "Client %d failed to parse JSON response: 'result' field is not an array or missing", self.number
            )
            return

        count = len(peers)
        # Only the low band is interesting, and only when it changes.
        if count != self.peers and count in (0, 1):
            logger.debug("Client %d has %d peer%s.", self.number, count, "" if count == 1 else "s")
        self.peers = count

    def check_block_number(self) -> None:
        if not self.is_online:
            return

        try:
            resp = rpc.post(self.url, "get_tip_header", self.timeout)
        except requests.exceptions.RequestException:
            logger.error("Client %d did not respond to the tip request.", self.number)
            return

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Client %d failed to parse JSON response: %s", self.number, e)
            return

        header = data.get("result") if isinstance(data, dict) else None
        if not isinstance(header, dict) or "number" not in header:
            logger.error("Client %d returned an unexpected JSON object.", self.number)
            return

        num_hex = header["number"]
        if not isinstance(num_hex, str):
            logger.error("Client %d returned a block number in an unexpected format.", self.number)
            return

        try:
            self.block_number = rpc.hex_to_u64(num_hex)
        except ValueError as e:
            logger.error("Client %d failed to parse block number: %s", self.number, e)
