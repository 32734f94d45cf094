"""
Append-only record of publish attempts.

Every completed send, successful or not, is appended exactly once. Storage
is capped at ``capacity`` records (oldest dropped first); the message view
only ever shows the most recent few.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, List, Union

HISTORY_DISPLAY_LIMIT = 5
KEY_DISPLAY_LIMIT = 20


@dataclass(frozen=True)
class SendSuccess:
    partition: int
    offset: int


@dataclass(frozen=True)
class SendFailure:
    reason: str


SendOutcome = Union[SendSuccess, SendFailure]


@dataclass(frozen=True)
class SendRecord:
    """One publish attempt and its result."""

    timestamp: datetime
    key: str
    value: str
    outcome: SendOutcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, SendSuccess)


class SendLedger:
    """Bounded, append-only history of send records."""

    def __init__(self, capacity: int = 1000):
        if capacity < HISTORY_DISPLAY_LIMIT:
            raise ValueError(f"capacity must be at least {HISTORY_DISPLAY_LIMIT}")
        self.capacity = capacity
        self._records: Deque[SendRecord] = deque(maxlen=capacity)

    def append(self, record: SendRecord) -> None:
        self._records.append(record)

    def recent(self, count: int = HISTORY_DISPLAY_LIMIT) -> List[SendRecord]:
        """Return the ``count`` most recent records, oldest first."""
        if count <= 0:
            return []
        return list(self._records)[-count:]

    def all(self) -> List[SendRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))


def truncate_key(key: str, limit: int = KEY_DISPLAY_LIMIT) -> str:
    """Shorten a key for display; the empty key is shown as ``(empty)``."""
    if key == "":
        return "(empty)"
    if len(key) <= limit:
        return key
    return key[:limit] + "..."
