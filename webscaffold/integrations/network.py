"""Bounded-time network reachability probe."""

from __future__ import annotations

import logging
import socket
import threading
import time

from webscaffold.config import NetworkConfig

logger = logging.getLogger(__name__)

Address = tuple[int, int, int, str, tuple]


def resolve(host: str, port: int, timeout: float) -> list[Address]:
    """``getaddrinfo`` for *host*, giving up after *timeout* seconds.

    The lookup runs on a daemon thread because the resolver itself has no
    timeout; an abandoned lookup never keeps the process alive.

    Raises:
        socket.timeout: The lookup did not finish in time.
        OSError: The lookup failed.
    """
    result: dict[str, object] = {}

    def lookup() -> None:
        try:
            result["addresses"] = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except OSError as exc:
            result["error"] = exc

    worker = threading.Thread(target=lookup, name=f"resolve-{host}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise socket.timeout(f"Resolving {host} took longer than {timeout}s")
    if "error" in result:
        raise result["error"]  # type: ignore[misc]
    return result["addresses"]  # type: ignore[return-value]


class NetworkProbe:
    """Checks connectivity by opening one TCP connection to a well-known host.

    Name resolution and the connect attempts share one budget of ``timeout``
    seconds, so callers never hang on an unreachable network or resolver.
    """

    def __init__(self, config: NetworkConfig | None = None) -> None:
        self.config = config or NetworkConfig()

    def is_reachable(self) -> bool:
        logger.info("Checking network connectivity...")
        if self._connect():
            logger.info("Network connectivity: OK")
            return True
        logger.info("Network connectivity: FAILED")
        return False

    def _connect(self) -> bool:
        host, port = self.config.probe_host, self.config.probe_port
        deadline = time.monotonic() + self.config.timeout
        try:
            addresses = resolve(host, port, self.config.timeout)
        except OSError as exc:
            logger.debug("Cannot resolve %s: %s", host, exc)
            return False

        for family, socktype, proto, _canonname, sockaddr in addresses:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            try:
                with socket.socket(family, socktype, proto) as sock:
                    sock.settimeout(remaining)
                    sock.connect(sockaddr)
            except OSError as exc:
                logger.debug("Connect to %s failed: %s", sockaddr, exc)
                continue
            return True
        return False
