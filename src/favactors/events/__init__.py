from .bus import Event, EventBus, Subscription
from .person_events import PersonsCommittedEvent

__all__ = [
    "Event",
    "EventBus",
    "PersonsCommittedEvent",
    "Subscription",
]
