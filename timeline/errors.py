"""Error taxonomy for feed assembly.

No retries happen anywhere in the core: any of these aborts the batch being
processed and is returned to the caller.
"""


class FeedError(RuntimeError):
    """Base class for feed assembly failures."""


class CacheDecodeError(FeedError):
    """A cached payload could not be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Malformed cache payload for {key!r}: {reason}")
        self.key = key


class CacheIOError(FeedError):
    """Transport or protocol failure talking to the cache."""


class StoreQueryError(FeedError):
    """Relational query failure."""


class BatchAbortError(FeedError):
    """Feed assembly aborted; the underlying failure is chained as __cause__."""

    def __init__(self, message: str, post_id: int | None = None) -> None:
        super().__init__(message)
        self.post_id = post_id
