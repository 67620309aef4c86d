import logging

from limits.storage import Storage, storage_from_string

logger = logging.getLogger(__name__)


class RateGatekeeper:
    def __init__(self, name: str, window_seconds: int, max_requests: int,
                 enabled: bool = True, storage_uri: str = "memory://"):
        self.name = name
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.enabled = enabled
        # each gatekeeper owns its storage; nothing is shared between routes
        self._storage: Storage = storage_from_string(storage_uri)

    def _counter_key(self, client: str) -> str:
        return f"keydrop/{self.name}/{client}"

    def admit(self, client: str) -> bool:
        """Count one request from ``client``; False once it is over the limit."""
        if not self.enabled:
            return True
        count = self._storage.incr(self._counter_key(client), self.window_seconds)
        if count > self.max_requests:
            logger.debug("%s limit hit for %s (%d/%d)", self.name, client, count, self.max_requests)
            return False
        return True

    def hits(self, client: str) -> int:
        return self._storage.get(self._counter_key(client))

    def reset(self) -> None:
        self._storage.reset()
