"""In-memory media store for development and testing."""

from storefront.media.port import MediaDeletionError, MediaStore


class FakeMediaStore(MediaStore):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Media store unavailable"
        self.deleted: list[str] = []
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Media store unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def delete(self, ref: str) -> None:
        self.calls.append({"method": "delete", "ref": ref})
        if not self.should_succeed:
            raise MediaDeletionError(ref, self.failure_reason)
        self.deleted.append(ref)
