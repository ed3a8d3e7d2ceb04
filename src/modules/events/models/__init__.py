from .event import Event, EventType

__all__ = ['Event', 'EventType']
