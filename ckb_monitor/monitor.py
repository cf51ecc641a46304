#!/usr/bin/env python3
"""
Fleet monitor for local CKB light clients.
Polls every client's JSON-RPC endpoint once per interval and logs offline clients,
low peer counts and clients whose tip lags behind the rest of the fleet.
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from pathlib import Path

from ckb_monitor.client import Client
from ckb_monitor.config import resolve_config
from ckb_monitor.log import setup_logging

logger = logging.getLogger(__name__)


def _join(numbers: list[int]) -> str:
    return ", ".join(str(n) for n in numbers)


class FleetMonitor:
    def __init__(self, config: dict):
        self.cfg = config
        self.max_block_diff = config["max_block_diff"]
        self.clients = [
            Client(i, config["host"], config["base_port"] + i, config["timeout"])
            for i in range(config["client_count"])
        ]

    def check_clients(self) -> int:
        """Run all checks in index order and return the highest block among online clients."""
        highest = 0
        for client in self.clients:
            logger.debug("Checking client %d.", client.number)
            client.check_rpc()
            if client.is_online:
                client.check_peers()
                client.check_block_number()
                highest = max(highest, client.block_number)
        return highest

    def lagging_clients(self, highest: int) -> list[Client]:
        return [c for c in self.clients if c.is_online and highest - c.block_number > self.max_block_diff]

    def group_clients(self) -> tuple[list[int], list[int], list[int]]:
        """Split client numbers into (online with 0 peers, online with 1 peer, offline)."""
        peer_0, peer_1, offline = [], [], []
        for client in self.clients:
            if not client.is_online:
                offline.append(client.number)
            elif client.peers == 0:
                peer_0.append(client.number)
            elif client.peers == 1:
                peer_1.append(client.number)
        return peer_0, peer_1, offline

    def report(self, highest: int) -> None:
        for client in self.lagging_clients(highest):
            logger.warning(
                "Client %d is lagging by %s blocks: %s",
                client.number,
                f"{highest - client.block_number:,}",
                f"{client.block_number:,}",
            )

        peer_0, peer_1, offline = self.group_clients()
        if peer_0:
            logger.info("There are %d clients with 0 peers: %s", len(peer_0), _join(peer_0))
        if peer_1:
            logger.info("There are %d clients with 1 peer: %s", len(peer_1), _join(peer_1))
        if offline:
            logger.info("There are %d clients that are offline: %s", len(offline), _join(offline))

    def sweep(self) -> int:
        highest = self.check_clients()
        self.report(highest)
        return highest

    def run(self, shutdown: threading.Event) -> None:
        interval = self.cfg["interval"]
        first, last = self.clients[0], self.clients[-1]
        logger.info(
            "Monitoring %d clients on ports %d-%d (interval: %ss, max block diff: %d, timeout: %ss)",
            len(self.clients),
            first.port,
            last.port,
            interval,
            self.max_block_diff,
            self.cfg["timeout"],
        )
        try:
            while not shutdown.is_set():
                self.sweep()
                shutdown.wait(timeout=interval)
        except Exception as e:
            logger.critical("Monitor stopped by unexpected error: %s", e)
            raise
        logger.info("Monitoring stopped")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Monitor a fleet of local CKB light clients over JSON-RPC")
    parser.add_argument("-c", "--config", type=Path, help="Path to YAML config (default: ./config.yaml if present)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = resolve_config(args.config, {"verbose": args.verbose})
    setup_logging(cfg["verbose"])

    shutdown = threading.Event()

    def on_signal(signum: int, frame: object) -> None:
        shutdown.set()

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    FleetMonitor(cfg).run(shutdown)


if __name__ == "__main__":
    main()
