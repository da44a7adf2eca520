# app/services/change_feed.py
"""
In-process change feed for the store collections.

Views register a callback against a named collection and get a Change
(created / updated / deleted diff) after every committed write to it.
subscribe() returns a Subscription; unsubscribe() is idempotent and the
subscription works as a context manager, so teardown is deterministic.

Callbacks run on the writer's thread, right after commit. A callback that
raises is logged and skipped; the write itself already succeeded.
"""

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)

COLLECTIONS = ("vehicles", "vehicleUnits", "spareParts", "transactions", "sales", "bikeServices")
ACTIONS = ("created", "updated", "deleted")


@dataclass
class Change:
    collection: str
    action: str               # created | updated | deleted
    record_id: Any
    data: Optional[dict] = None
    at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "type": "change",
            "collection": self.collection,
            "action": self.action,
            "id": self.record_id,
            "data": self.data,
            "at": self.at.isoformat(),
        }


class Subscription:
    def __init__(self, feed: "ChangeFeed", collection: str, token: int):
        self._feed = feed
        self.collection = collection
        self.token = token
        self.active = True

    def unsubscribe(self):
        if self.active:
            self._feed._remove(self.collection, self.token)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False


class ChangeFeed:
    def __init__(self):
        self._subscribers: dict[str, dict[int, Callable[[Change], None]]] = {c: {} for c in COLLECTIONS}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, collection: str, callback: Callable[[Change], None]) -> Subscription:
        _check_collection(collection)
        with self._lock:
            token = next(self._tokens)
            self._subscribers[collection][token] = callback
        logger.debug(f"[FEED] +subscriber {token} on {collection}")
        return Subscription(self, collection, token)

    def _remove(self, collection: str, token: int):
        with self._lock:
            self._subscribers[collection].pop(token, None)
        logger.debug(f"[FEED] -subscriber {token} on {collection}")

    def subscriber_count(self, collection: str) -> int:
        _check_collection(collection)
        with self._lock:
            return len(self._subscribers[collection])

    def publish(self, collection: str, action: str, record_id, data: Optional[dict] = None) -> Change:
        _check_collection(collection)
        if action not in ACTIONS:
            raise ValueError(f"Unknown change action '{action}'")
        change = Change(collection=collection, action=action, record_id=record_id, data=data)

        # Copy under the lock so callbacks may unsubscribe while being notified
        with self._lock:
            callbacks = list(self._subscribers[collection].values())
        for callback in callbacks:
            try:
                callback(change)
            except Exception as e:
                logger.error(f"[FEED] Subscriber on {collection} failed: {e}", exc_info=True)
        return change


def _check_collection(collection: str):
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection '{collection}'")


feed = ChangeFeed()


def publish_record(collection: str, action: str, schema, record) -> Change:
    """Publish a committed ORM row, serialised through its response schema."""
    data = schema.model_validate(record).model_dump(mode="json")
    return feed.publish(collection, action, record.id, data)
