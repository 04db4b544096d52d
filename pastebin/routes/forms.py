"""
Browser form routes: the create page and its form submission.
"""
import logging

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse

from pastebin.dependencies import get_base_url, get_manager
from pastebin.exceptions import PasteValidationError, StorageUnavailable
from pastebin.manager import PasteStoreManager
from pastebin.pages import (
    render_create_form,
    render_created_page,
    render_invalid_page,
    render_unavailable_page,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _form_number(value: str):
    """
    Parse an optional integer form field.

    Blank means "not set". Text that is not an integer is passed through
    unchanged so PasteStoreManager.create rejects it in its usual order.
    """
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return value


@router.get("/", response_class=HTMLResponse)
async def create_page() -> HTMLResponse:
    """Serve the create paste HTML page."""
    return HTMLResponse(render_create_form())


@router.post("/create", response_class=HTMLResponse)
async def create_from_form(
    content: str = Form(""),
    ttl_seconds: str = Form(""),
    max_views: str = Form(""),
    base_url: str = Depends(get_base_url),
    manager: PasteStoreManager = Depends(get_manager),
) -> HTMLResponse:
    try:
        paste = manager.create(
            content=content,
            ttl_seconds=_form_number(ttl_seconds),
            max_views=_form_number(max_views),
            base_url=base_url,
        )
    except PasteValidationError as e:
        return HTMLResponse(render_invalid_page(e.code), status_code=400)
    except StorageUnavailable as e:
        logger.error(f"Storage unavailable creating paste from form: {e}")
        return HTMLResponse(render_unavailable_page(), status_code=503)
    return HTMLResponse(render_created_page(paste.url))
