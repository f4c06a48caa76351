"""
Same-origin API proxy.

Browser scripts call /api/proxy/<path>; the request is relayed to the
backend with the session's bearer token so the token never reaches the
page.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from bookcrew.api import BookCrewApi, NetworkError
from bookcrew.api.errors import NETWORK_ERROR_MESSAGE
from bookcrew.routes.deps import get_api

router = APIRouter(prefix="/api/proxy", tags=["proxy"])

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/{path:path}", methods=_METHODS)
async def proxy(path: str, request: Request, api: Annotated[BookCrewApi, Depends(get_api)]) -> Response:
    body = await request.body()
    try:
        res = await api.client.forward(
            request.method,
            path,
            content=body,
            params=list(request.query_params.multi_items()),
            content_type=request.headers.get("content-type"),
        )
    except NetworkError:
        return JSONResponse(
            status_code=502,
            content={"success": False, "message": NETWORK_ERROR_MESSAGE},
        )

    headers = {}
    if "content-type" in res.headers:
        headers["Content-Type"] = res.headers["content-type"]
    return Response(content=res.content, status_code=res.status_code, headers=headers)
