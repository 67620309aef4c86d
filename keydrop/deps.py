from dataclasses import dataclass
from fastapi import Request
from fastapi.responses import PlainTextResponse
from .config import Settings
from .errors import ErrorKind, translate
from .services.audit import OutcomeLog
from .services.keys import KeyRegistry
from .services.ratelimit import RateGatekeeper
from .services.upload import UploadPipeline


@dataclass(frozen=True)
class Gateway:
    settings: Settings
    registry: KeyRegistry
    pipeline: UploadPipeline
    upload_gate: RateGatekeeper
    page_gate: RateGatekeeper
    log: OutcomeLog


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def respond(log: OutcomeLog, client: str, kind: ErrorKind, detail: str | None = None) -> PlainTextResponse:
    """Single exit for every failure: translate, log, answer."""
    status, message = translate(kind)
    log.failure(client, status, message, detail)
    return PlainTextResponse(message, status_code=status)


# room for boundaries and part headers around the single file
MULTIPART_OVERHEAD = 64 * 1024


class BodyTooLarge(Exception):
    pass


def body_limit(settings: Settings) -> int | None:
    if settings.max_file_size is None:
        return None
    return settings.max_file_size + MULTIPART_OVERHEAD


def declared_length(request: Request) -> int | None:
    try:
        return int(request.headers["content-length"])
    except (KeyError, ValueError):
        return None


def capped(request: Request, limit: int | None) -> Request:
    """Same request, but reading more than ``limit`` body bytes raises BodyTooLarge."""
    if limit is None:
        return request
    received = 0

    async def receive():
        nonlocal received
        message = await request.receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise BodyTooLarge(received)
        return message

    return Request(request.scope, receive)
