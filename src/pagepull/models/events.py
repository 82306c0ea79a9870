"""Progress events emitted while a batch is being fetched."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional


class BatchEventType(str, Enum):
    """Types of events emitted during a batch fetch."""

    BATCH_STARTED = "batch_started"
    PAGE_STARTED = "page_started"
    PAGE_COMPLETED = "page_completed"
    PAGE_FAILED = "page_failed"
    BATCH_COMPLETED = "batch_completed"


@dataclass
class BatchEvent:
    """
    Event emitted during a batch fetch.

    Page events arrive in completion order, not request order; ``index`` is
    the 0-based position of the URL in the request so consumers can map an
    event back to its slot.

    Example:
        def on_event(event: BatchEvent) -> None:
            if event.type == BatchEventType.PAGE_FAILED:
                print(f"Error: {event.url} - {event.error}")

        fetcher = BatchFetcher(renderer, on_event=on_event)
    """

    type: BatchEventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    index: Optional[int] = None
    total: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == BatchEventType.PAGE_FAILED


# Type alias for event callback
EventEmitter = Callable[[BatchEvent], None]
