from __future__ import annotations

from html import escape

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from ..config import ServerContext
from ..domain.outcomes import (
    Forbidden,
    InternalError,
    JsonPayload,
    ResponseOutcome,
    StaticContent,
)
from ..service.static_service import resolve_request
from .models import MetadataEnvelope

router = APIRouter()

_ERROR_PAGE = (
    "<!doctype html><html><head><meta charset=\"utf-8\"><title>{status} {title}</title></head>"
    "<body><h1>{status} {title}</h1><p>{message}</p></body></html>"
)


def get_context(request: Request) -> ServerContext:
    """Dependency: the immutable context installed by create_app()."""
    return request.app.state.context


def _raw_path(request: Request) -> str | bytes:
    # Prefer the undecoded path so the sanitizer does the percent-decoding.
    raw = request.scope.get("raw_path")
    if raw:
        return raw.split(b"?", 1)[0]
    return request.url.path


def _error_page(status: int, title: str, message: str) -> HTMLResponse:
    body = _ERROR_PAGE.format(status=status, title=title, message=escape(message))
    return HTMLResponse(content=body, status_code=status)


def render(outcome: ResponseOutcome) -> Response:
    """Turn a resolved outcome into the HTTP response sent to the client."""
    if isinstance(outcome, StaticContent):
        return Response(content=outcome.body, status_code=outcome.status, media_type=outcome.content_type)
    if isinstance(outcome, JsonPayload):
        envelope = MetadataEnvelope.model_validate(outcome.body)
        return JSONResponse(content=envelope.render(), status_code=outcome.status)
    if isinstance(outcome, Forbidden):
        return _error_page(outcome.status, "Forbidden", outcome.message)
    if isinstance(outcome, InternalError):
        return _error_page(outcome.status, "Internal Server Error", outcome.message)
    # SpaIndex, NotFoundCustom, NotFoundBuiltin: an HTML document with its status.
    return HTMLResponse(content=outcome.body, status_code=outcome.status)


@router.get(
    "/{request_path:path}",
    summary="Serve a static file, directory listing or file metadata",
)
async def serve(
    request: Request,
    request_path: str,
    context: ServerContext = Depends(get_context),
) -> Response:
    """Resolve any GET under the public root.

    `?info` returns file metadata and `?list` a directory listing (both
    ignored in SPA mode); everything else is a static file or the fallback
    page.
    """
    params = request.query_params
    outcome = await resolve_request(
        context,
        _raw_path(request),
        info="info" in params,
        listing="list" in params,
    )
    return render(outcome)
