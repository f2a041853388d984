"""Network reachability probes.

The router asks a probe before every submission; probes never cache.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from .config import CONNECTIVITY_HOST, CONNECTIVITY_PORT, CONNECTIVITY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ConnectivityProbe(ABC):
    """Answers whether the remote model service is likely reachable."""

    @abstractmethod
    async def is_online(self) -> bool:
        pass


class SocketConnectivityProbe(ConnectivityProbe):
    """Online if a TCP connection to a well-known host opens in time."""

    def __init__(
        self,
        host: str = CONNECTIVITY_HOST,
        port: int = CONNECTIVITY_PORT,
        timeout: float = CONNECTIVITY_TIMEOUT_SECONDS,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout

    async def is_online(self) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug("Connectivity probe to %s:%s failed: %s", self._host, self._port, e)
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True


class StaticConnectivityProbe(ConnectivityProbe):
    """Fixed answer; used for forced offline mode and in tests."""

    def __init__(self, online: bool) -> None:
        self.online = online

    async def is_online(self) -> bool:
        return self.online
