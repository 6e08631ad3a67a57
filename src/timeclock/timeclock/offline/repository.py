from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from ..entries.model import PendingEvent


@dataclass(frozen=True)
class QueuedEvent:
    """Sự kiện đang chờ đồng bộ, kèm vị trí trong hàng đợi."""

    queue_id: int
    event: PendingEvent


class EventQueue(Protocol):
    """Durable append/read/remove log of pending clock events.

    Order is insertion order. An appended event is never modified; it leaves
    the queue only through `remove_acknowledged`.
    """

    def append(self, event: PendingEvent) -> None:
        raise NotImplementedError

    def peek_all(self) -> Sequence[QueuedEvent]:
        raise NotImplementedError

    def remove_acknowledged(self, queue_ids: Iterable[int]) -> None:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
