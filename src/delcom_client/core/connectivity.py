"""
Network availability checks.

View-models ask a `ConnectivityMonitor` before issuing any request and fail
locally when it reports no network.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class ConnectivityMonitor(ABC):
    """Reports whether a usable network is present."""

    @abstractmethod
    async def is_available(self) -> bool:
        ...


class AlwaysOnline(ConnectivityMonitor):
    """Assumes the network is always reachable."""

    async def is_available(self) -> bool:
        return True


class StaticConnectivity(ConnectivityMonitor):
    """Connectivity fixed by the caller; can be flipped at runtime."""

    def __init__(self, available: bool = True):
        self.available = available

    async def is_available(self) -> bool:
        return self.available


class SocketConnectivity(ConnectivityMonitor):
    """Probes a TCP connection to the API host."""

    def __init__(self, base_url: str, timeout: float = 3.0):
        parsed = urlparse(base_url)
        self.host: Optional[str] = parsed.hostname
        self.port = parsed.port or (443 if parsed.scheme == "https" else 80)
        self.timeout = timeout

    async def is_available(self) -> bool:
        if not self.host:
            return False
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug(f"Connectivity probe to {self.host}:{self.port} failed: {e}")
            return False
        writer.close()
        await writer.wait_closed()
        return True
