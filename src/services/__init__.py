"""Services layer"""

from .event_bus import EventBus, Subscription
from .middleware import log_middleware

__all__ = [
    "EventBus",
    "Subscription",
    "log_middleware",
]
