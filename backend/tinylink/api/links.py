import time
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from ..config import Settings
from ..core.errors import NotFoundError, ValidationError
from ..core.shortener import generate_code, is_valid_code
from ..schemas.link import DeleteResponse, LinkCreate, LinkPreview, LinkResponse
from ..services.link_store import LinkStore
from ..utils.validators import is_valid_url
from .deps import get_settings, get_store

router = APIRouter(prefix="/links", tags=["links"])
redirect_router = APIRouter(tags=["redirect"])


@router.get("/", response_class=PlainTextResponse)
def dashboard():
    """Dashboard home"""
    return "TinyLink Dashboard"


@router.get("/healthz")
def links_health(request: Request):
    """Health check for the links API"""
    return {"status": "ok", "uptime": time.monotonic() - request.app.state.started_at}


@router.post("", response_model=LinkResponse, status_code=201)
@router.post("/", response_model=LinkResponse, status_code=201, include_in_schema=False)
def create_link(
    link_data: LinkCreate,
    store: LinkStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings)
):
    """
    Create a short link.

    A random code is generated when none is supplied. A generated code that
    collides with an existing one is reported as a duplicate; the caller may
    simply retry.
    """
    if not is_valid_url(link_data.target):
        raise ValidationError("Invalid URL")

    if link_data.code:
        # Fail before touching the database
        if not is_valid_code(link_data.code):
            raise ValidationError("Invalid custom code format")
        code = link_data.code
    else:
        code = generate_code(app_settings.CODE_LENGTH)

    return store.create(code, link_data.target)


@router.get("/all", response_model=List[LinkResponse])
def list_links(store: LinkStore = Depends(get_store)):
    """Get all links, newest first"""
    return store.list_all()


@router.get("/{code}/preview", response_model=LinkPreview)
def preview_link(code: str, store: LinkStore = Depends(get_store)):
    """Show where a code points without counting a click"""
    return store.get_by_code(code)


@router.post("/{code}/click", response_model=LinkResponse)
@router.get("/{code}/click", response_model=LinkResponse)
def click_link(code: str, store: LinkStore = Depends(get_store)):
    """Increment the click count and return the updated link"""
    return store.record_click(code)


@router.get("/{code}", response_model=LinkResponse)
def get_link(code: str, store: LinkStore = Depends(get_store)):
    """Get stats for a link"""
    return store.get_by_code(code)


@router.delete("/{code}", response_model=DeleteResponse)
def delete_link(code: str, store: LinkStore = Depends(get_store)):
    """Delete a link. Unknown codes are reported as deleted too."""
    store.delete(code)
    return DeleteResponse(success=True)


@redirect_router.get("/r/{code}")
def redirect_to_target(code: str, store: LinkStore = Depends(get_store)):
    """
    Redirect to the target URL.

    Lookup only: visits through this path are not counted as clicks.
    """
    try:
        target = store.redirect_target(code)
    except NotFoundError:
        return PlainTextResponse("Short URL not found", status_code=404)

    return RedirectResponse(url=target, status_code=302)
