from pathlib import Path
from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from ..deps import Gateway, client_address, get_gateway, respond
from ..errors import ErrorKind

router = APIRouter(tags=["page"])

INDEX_HTML = Path(__file__).resolve().parent.parent / "static" / "index.html"


@router.get("/", include_in_schema=False)
def index(request: Request, gw: Gateway = Depends(get_gateway)):
    client = client_address(request)
    if not gw.page_gate.admit(client):
        return respond(gw.log, client, ErrorKind.RATE_LIMITED)
    return FileResponse(INDEX_HTML, media_type="text/html")
