"""
Change notification bus.
"""

from smartcow.events.bus import ChangeBus, Notification, TopicCursor

__all__ = ["ChangeBus", "Notification", "TopicCursor"]
