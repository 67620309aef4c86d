from fastapi import APIRouter, Depends, Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from fastapi.responses import PlainTextResponse
from ..deps import BodyTooLarge, Gateway, body_limit, capped, client_address, declared_length, get_gateway, respond
from ..errors import ErrorKind

router = APIRouter(tags=["upload"])

SUCCESS_MESSAGE = "Upload successful"


@router.post("/upload")
async def upload_file(request: Request, key: str | None = None, gw: Gateway = Depends(get_gateway)):
    client = client_address(request)
    # gate before the body is read: a rejected request has no side effects
    if not gw.upload_gate.admit(client):
        return respond(gw.log, client, ErrorKind.RATE_LIMITED)

    limit = body_limit(gw.settings)
    length = declared_length(request)
    if limit is not None and length is not None and length > limit:
        return respond(gw.log, client, ErrorKind.SIZE_LIMIT_EXCEEDED, f"content-length {length} > {limit}")

    try:
        form = await capped(request, limit).form(max_files=gw.settings.max_files, max_fields=100)
    except BodyTooLarge as exc:
        return respond(gw.log, client, ErrorKind.SIZE_LIMIT_EXCEEDED, f"body passed {limit} bytes ({exc})")
    except HTTPException as exc:
        # starlette reports malformed or oversized multipart bodies this way
        return respond(gw.log, client, ErrorKind.UNSUPPORTED_REQUEST, str(exc.detail))
    except MultiPartException as exc:
        return respond(gw.log, client, ErrorKind.UNSUPPORTED_REQUEST, exc.message)

    try:
        outcome = await gw.pipeline.handle(form, key)
    finally:
        await form.close()

    if not outcome.ok:
        return respond(gw.log, client, outcome.error, outcome.detail)

    gw.log.success(client, 201, f"{SUCCESS_MESSAGE} for {key}")
    return PlainTextResponse(SUCCESS_MESSAGE, status_code=201)
