"""
Paste routes.
Handles create, fetch (API), and view (HTML) operations.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from pastebin.dependencies import get_base_url, get_manager, get_now_ms
from pastebin.exceptions import PasteNotFound, StorageUnavailable
from pastebin.manager import PasteStoreManager
from pastebin.models import ErrorResponse, PasteCreate, PasteResponse, PasteView
from pastebin.pages import render_not_found_page, render_unavailable_page

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/pastes",
    response_model=PasteResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def create_paste(
    paste: PasteCreate,
    base_url: str = Depends(get_base_url),
    manager: PasteStoreManager = Depends(get_manager),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional ttl_seconds, optional max_views)
        base_url: Scheme and host of the share URL

    Returns:
        Paste ID and shareable URL
    """
    return manager.create(
        content=paste.content,
        ttl_seconds=paste.ttl_seconds,
        max_views=paste.max_views,
        base_url=base_url,
    )


@router.get(
    "/api/pastes/{paste_id}",
    response_model=PasteView,
    responses={404: {"model": ErrorResponse}},
)
async def fetch_paste(
    paste_id: str,
    now_ms: Optional[int] = Depends(get_now_ms),
    manager: PasteStoreManager = Depends(get_manager),
) -> PasteView:
    """
    Fetch a paste (API endpoint).
    Each fetch of a view-limited paste uses up one view.

    Raises:
        PasteNotFound: If paste not found, expired, or view limit exceeded (404)
    """
    return manager.retrieve(paste_id, now_ms=now_ms)


@router.get("/p/{paste_id}", response_class=HTMLResponse)
async def view_paste(
    paste_id: str,
    now_ms: Optional[int] = Depends(get_now_ms),
    manager: PasteStoreManager = Depends(get_manager),
) -> HTMLResponse:
    """View a paste as HTML, or a 404 page if it can't be served."""
    try:
        page = manager.render_view_page(paste_id, now_ms=now_ms)
    except PasteNotFound:
        return HTMLResponse(render_not_found_page(), status_code=404)
    except StorageUnavailable as e:
        logger.error(f"Storage unavailable viewing paste {paste_id}: {e}")
        return HTMLResponse(render_unavailable_page(), status_code=503)
    return HTMLResponse(page)
