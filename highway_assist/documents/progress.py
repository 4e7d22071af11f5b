"""Per-document progress channels.

Each in-flight document owns one channel in an explicit registry held by the
tracker. A channel only moves forward: percentages are clamped to 0..100 and
values below the last emitted one are dropped. Once closed (terminal status
or removal) a channel ignores further updates.
"""

import logging
from collections.abc import Callable

from highway_assist.models import ProgressUpdate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]


class ProgressChannel:
    """Delivers (percentage, status) pairs for one document."""

    def __init__(self, document_id: str, callback: ProgressCallback | None = None) -> None:
        self.document_id = document_id
        self.last: int = 0
        self.closed: bool = False
        self._callback = callback

    def emit(self, progress: int, status: str) -> bool:
        """Deliver an update.

        Returns:
            Whether the update was delivered.
        """
        if self.closed:
            return False

        progress = max(0, min(100, progress))
        if progress < self.last:
            logger.debug(
                f"Dropping regressing progress {progress} < {self.last} for {self.document_id}"
            )
            return False

        self.last = progress
        if self._callback is not None:
            self._callback(
                ProgressUpdate(document_id=self.document_id, progress=progress, status=status)
            )
        return True

    def close(self) -> None:
        self.closed = True
        self._callback = None


class ProgressRegistry:
    """Progress channels keyed by document id."""

    def __init__(self) -> None:
        self._channels: dict[str, ProgressChannel] = {}

    def register(
        self, document_id: str, callback: ProgressCallback | None = None
    ) -> ProgressChannel:
        """Open a channel, replacing (and closing) any previous one for the id."""
        self.unregister(document_id)
        channel = ProgressChannel(document_id, callback)
        self._channels[document_id] = channel
        return channel

    def get(self, document_id: str) -> ProgressChannel | None:
        return self._channels.get(document_id)

    def unregister(self, document_id: str) -> None:
        channel = self._channels.pop(document_id, None)
        if channel is not None:
            channel.close()

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._channels

    def __len__(self) -> int:
        return len(self._channels)
