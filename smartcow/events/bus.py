# ==============================================================================
# CHANGE NOTIFICATION BUS - Sequenced Publish/Subscribe
# ==============================================================================
# Process-local topics with a monotonic sequence per topic
# Sibling-store writes are bridged in as external notifications
# ==============================================================================

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from smartcow.core.constants import topic_for_key
from smartcow.database.local_store import LocalRecordStore, StorageChange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """
    One "something changed, re-fetch" signal.

    Attributes:
        topic: Changed namespace
        sequence: Monotonic per-topic counter within this bus
        payload: Optional details, e.g. ``{"cpId": "seller:alice"}``
        external: True when the change was written by a sibling store
        emitted_at: UTC timestamp of emission
    """

    topic: str
    sequence: int
    payload: Dict[str, Any] = field(default_factory=dict)
    external: bool = False
    emitted_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


Handler = Callable[[Notification], None]


class ChangeBus:
    """
    Publish/subscribe bus for record-change notifications.

    Notifications carry no delta; subscribers re-read through the facade.
    Every topic has its own sequence so a subscriber can notice that it
    missed or reordered notifications (see ``TopicCursor``).

    Example:
        >>> bus = ChangeBus()
        >>> seen = []
        >>> unsubscribe = bus.subscribe("smartcow_marketplace_updated", seen.append)
        >>> bus.notify("smartcow_marketplace_updated", {"cpId": "seller:alice"}).sequence
        1
    """

    WILDCARD = "*"

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._sequences: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """
        Register ``handler`` for ``topic`` (or ``"*"`` for all topics).

        Returns:
            Callable that removes the subscription
        """
        with self._lock:
            self._handlers[topic].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers[topic]:
                    self._handlers[topic].remove(handler)

        return unsubscribe

    def notify(
        self,
        topic: str,
        payload: Optional[Dict[str, Any]] = None,
        external: bool = False,
    ) -> Notification:
        """Emit a notification to every subscriber of ``topic``."""
        with self._lock:
            self._sequences[topic] += 1
            notification = Notification(
                topic=topic,
                sequence=self._sequences[topic],
                payload=dict(payload or {}),
                external=external,
            )
            handlers = list(self._handlers[topic]) + list(self._handlers[self.WILDCARD])

        logger.debug(f"Notify {topic} #{notification.sequence} -> {len(handlers)} handler(s)")
        for handler in handlers:
            try:
                handler(notification)
            except Exception:
                logger.exception(f"Subscriber failed on {topic} #{notification.sequence}")
        return notification

    def current_sequence(self, topic: str) -> int:
        """Last sequence emitted on ``topic`` (0 if none)."""
        with self._lock:
            return self._sequences.get(topic, 0)

    def sequences(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._sequences)

    # --------------------------------------------------------------------------
    # Sibling store bridge
    # --------------------------------------------------------------------------

    def bridge(self, store: LocalRecordStore) -> None:
        """Republish writes made by sibling stores as external notifications."""
        store.on_external_change(self._on_storage_change)

    def _on_storage_change(self, change: StorageChange) -> None:
        topic = topic_for_key(change.key)
        if topic is None:
            return
        self.notify(topic, {"key": change.key}, external=True)


class TopicCursor:
    """
    Tracks the last sequence a subscriber has seen on one topic.

    ``advance`` returns how many notifications were skipped since the
    previous one (0 when in order, negative when a stale one arrives).
    """

    def __init__(self, topic: str, start: int = 0) -> None:
        self.topic = topic
        self.last_seen = start

    def advance(self, notification: Notification) -> int:
        if notification.topic != self.topic:
            raise ValueError(
                f"Cursor for '{self.topic}' got '{notification.topic}'"
            )
        gap = notification.sequence - self.last_seen - 1
        if gap >= 0:
            self.last_seen = notification.sequence
        return gap
