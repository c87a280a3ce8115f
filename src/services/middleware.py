"""
EventBus middleware

Each middleware receives the event before any handler runs and returns it
(possibly replaced) or None to drop it.
"""

from models.events import Event
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log every published stage signal with its payload

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source = event.source.name if event.source else "NONE"
    log.info(f"{event.type.name} ({source})", **event.to_data())
    return event
