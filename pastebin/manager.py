"""
Paste store manager.
Creates paste records and serves them while enforcing expiry and view limits.
"""
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from pastebin.database import PasteStore
from pastebin.exceptions import (
    InvalidContent,
    InvalidMaxViews,
    InvalidTTL,
    PasteNotFound,
    StorageUnavailable,
)
from pastebin.ids import generate_paste_id, is_valid_paste_id
from pastebin.models import PasteResponse, PasteView
from pastebin.pages import render_paste_page

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def current_time_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def format_timestamp(epoch_ms: int) -> str:
    """Format epoch milliseconds as ISO 8601 UTC, e.g. 2024-01-01T00:00:10.000Z."""
    moment = _EPOCH + timedelta(milliseconds=epoch_ms)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _record_key(paste_id: str) -> str:
    return f"paste:{paste_id}"


def _views_key(paste_id: str) -> str:
    return f"paste:{paste_id}:views"


def _positive_int(value: Any, error: type) -> Optional[int]:
    """
    Validate an optional positive integer.

    None means "not set". Integral floats are accepted since JSON does not
    distinguish 10 from 10.0; booleans are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise error()
    if isinstance(value, float):
        if not value.is_integer():
            raise error()
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise error()
    return value


def _stored_int(record: Dict[str, str], field: str) -> Optional[int]:
    # Empty string is how "not set" is stored
    raw = record.get(field)
    if raw in (None, ""):
        return None
    return int(raw)


class PasteStoreManager:
    """
    Lifecycle of paste records on top of a storage engine.

    The manager keeps no state of its own. Every record lives in the store
    as a hash holding content, expires_at and max_views, with a separate
    counter key for views. A record stops being served once the clock
    passes expires_at or the counter passes max_views.
    """

    def __init__(self, store: PasteStore, clock: Callable[[], int] = current_time_ms):
        """
        Args:
            store: Storage engine handle, opened and closed by the caller
            clock: Returns the current time in epoch milliseconds
        """
        self.store = store
        self.clock = clock

    def create(
        self,
        content: Any,
        ttl_seconds: Any = None,
        max_views: Any = None,
        base_url: str = "",
    ) -> PasteResponse:
        """
        Create a paste.

        Args:
            content: Text content, non-blank
            ttl_seconds: Optional time-to-live in seconds
            max_views: Optional maximum number of successful reads
            base_url: Scheme and host the share URL is built on

        Returns:
            Paste ID and shareable URL

        Raises:
            InvalidContent, InvalidTTL, InvalidMaxViews: Before anything is written
            StorageUnavailable: If the write fails
        """
        if not isinstance(content, str) or not content.strip():
            raise InvalidContent()
        ttl_seconds = _positive_int(ttl_seconds, InvalidTTL)
        max_views = _positive_int(max_views, InvalidMaxViews)

        paste_id = generate_paste_id()
        now_ms = self.clock()
        expires_at = now_ms + ttl_seconds * 1000 if ttl_seconds is not None else None

        self.store.write_fields(
            _record_key(paste_id),
            {
                "content": content,
                "expires_at": "" if expires_at is None else str(expires_at),
                "max_views": "" if max_views is None else str(max_views),
                "created_at": str(now_ms),
            },
            ttl_seconds=ttl_seconds,
        )
        logger.info(
            f"Paste {paste_id} created (ttl_seconds={ttl_seconds}, max_views={max_views})"
        )

        url = f"{base_url.rstrip('/')}/p/{paste_id}"
        return PasteResponse(id=paste_id, url=url)

    def retrieve(self, paste_id: str, now_ms: Optional[int] = None) -> PasteView:
        """
        Fetch a paste, consuming one view if it has a view limit.

        Checks run in order: existence, expiry, then view accounting, so a
        view is never counted against a paste that is already gone.

        Args:
            paste_id: Paste identifier
            now_ms: Current time override in epoch milliseconds

        Returns:
            Paste content with remaining views and expiry

        Raises:
            PasteNotFound: If the paste is missing, expired, or out of views
            StorageUnavailable: If a storage call fails
        """
        if not is_valid_paste_id(paste_id):
            logger.warning(f"Paste id {paste_id!r} is malformed")
            raise PasteNotFound(paste_id)

        record = self.store.read_all_fields(_record_key(paste_id))
        if not record.get("content"):
            logger.warning(f"Paste {paste_id} not found")
            raise PasteNotFound(paste_id)

        if now_ms is None:
            now_ms = self.clock()

        expires_at = _stored_int(record, "expires_at")
        if expires_at is not None and now_ms > expires_at:
            logger.warning(f"Paste {paste_id} has expired")
            raise PasteNotFound(paste_id)

        remaining_views = None
        max_views = _stored_int(record, "max_views")
        if max_views is not None:
            # The counter lives as long as the whole record, so it is never
            # dropped while the record can still be served
            counter_ttl = None
            created_at = _stored_int(record, "created_at")
            if expires_at is not None and created_at is not None:
                counter_ttl = max(math.ceil((expires_at - created_at) / 1000), 1)
            # Incremented before the limit check; overshoot is rejected below
            used = self.store.increment(_views_key(paste_id), ttl_seconds=counter_ttl)
            if used > max_views:
                logger.warning(f"Paste {paste_id} view limit exceeded")
                raise PasteNotFound(paste_id)
            remaining_views = max(max_views - used, 0)

        return PasteView(
            content=record["content"],
            remaining_views=remaining_views,
            expires_at=format_timestamp(expires_at) if expires_at is not None else None,
        )

    def render_view_page(self, paste_id: str, now_ms: Optional[int] = None) -> str:
        """Same checks as retrieve(), returning the paste as an HTML page."""
        paste = self.retrieve(paste_id, now_ms=now_ms)
        return render_paste_page(paste_id, paste.content)

    def health_check(self) -> bool:
        """Check if the storage engine is reachable."""
        try:
            return self.store.ping()
        except StorageUnavailable as e:
            logger.error(f"Health check failed: {e}")
            return False

