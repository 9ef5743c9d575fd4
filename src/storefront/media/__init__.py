"""Media store factory.

Provides get_media_store() / set_media_store() to swap implementations.
Only the in-memory FakeMediaStore ships with the storefront; a hosted
store plugs in through set_media_store() at startup.
"""

from storefront.media.fake_adapter import FakeMediaStore
from storefront.media.port import MediaDeletionError, MediaStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_current_store: MediaStore | None = None


def get_media_store() -> MediaStore:
    global _current_store
    if _current_store is None:
        _current_store = FakeMediaStore()
    return _current_store


def set_media_store(store: MediaStore) -> None:
    global _current_store
    _current_store = store


def reset_media_store() -> None:
    global _current_store
    _current_store = None


def discard_media(refs, **log_context) -> list[str]:
    """Delete ``refs`` from the media store, logging failures instead of raising.

    Returns the refs that could not be deleted.
    """
    store = get_media_store()
    failed = []
    for ref in refs:
        if not ref:
            continue
        try:
            store.delete(ref)
        except MediaDeletionError as exc:
            logger.warning("Media deletion failed", ref=ref, reason=exc.reason, **log_context)
            failed.append(ref)
    return failed
