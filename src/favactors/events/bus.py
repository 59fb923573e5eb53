"""In-process publish/subscribe for application events."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""

    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(eq=False)
class Subscription:
    """Returned by :meth:`EventBus.subscribe`; pass it to ``unsubscribe``."""

    event_type: Type[Event]
    handler: Callable[[Event], None]
    active: bool = True


class EventBus:
    """Deliver events to the handlers subscribed to their exact type.

    Handlers run on the publishing thread, in subscription order. A handler
    that raises is logged and does not stop delivery to the others. GUI
    subscribers that need the UI thread wrap their handler in a dispatcher.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable[[Event], None]) -> Subscription:
        subscription = Subscription(event_type, handler)
        with self._lock:
            self._handlers[event_type].append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        with self._lock:
            handlers = self._handlers.get(subscription.event_type, [])
            if subscription in handlers:
                handlers.remove(subscription)

    def publish(self, event: Event) -> None:
        event_type = type(event)
        with self._lock:
            subscriptions = list(self._handlers.get(event_type, ()))

        for subscription in subscriptions:
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception as exc:
                self._logger.error("Handler for %s failed: %s", event_type.__name__, exc)
