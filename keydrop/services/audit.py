import logging

logger = logging.getLogger("keydrop.access")


class OutcomeLog:
    """One line per request outcome, attributed to the client address."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def success(self, client: str, status: int, message: str) -> None:
        if self.enabled:
            logger.info("[%s] [%s] %s", client, status, message)

    def failure(self, client: str, status: int, message: str, detail: str | None = None) -> None:
        if not self.enabled:
            return
        if detail:
            logger.warning("[%s] [%s] Upload failed with: %s (%s)", client, status, message, detail)
        else:
            logger.warning("[%s] [%s] Upload failed with: %s", client, status, message)
