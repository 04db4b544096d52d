"""
Request-scoped dependencies shared by the route modules.
"""
import logging
from typing import Optional

from fastapi import Header, Request

from pastebin.config import Settings
from pastebin.manager import PasteStoreManager

logger = logging.getLogger(__name__)


def get_manager(request: Request) -> PasteStoreManager:
    """Paste manager built at application startup."""
    return request.app.state.manager


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_now_ms(
    request: Request,
    x_test_now_ms: Optional[str] = Header(None),
) -> Optional[int]:
    """
    Current time override for deterministic testing.

    Only honoured in TEST_MODE. Returns None when the manager's own clock
    should be used.

    Args:
        request: HTTP request context
        x_test_now_ms: Test timestamp header (milliseconds since epoch)
    """
    if not get_settings(request).TEST_MODE or not x_test_now_ms:
        return None
    try:
        return int(x_test_now_ms)
    except ValueError as e:
        logger.warning(f"Invalid x-test-now-ms header: {e}")
        return None


def get_base_url(request: Request) -> str:
    """Scheme and host share links are built on."""
    domain = get_settings(request).APP_DOMAIN
    if domain:
        return domain
    return str(request.base_url)
