"""Ports - interfaces/protocols for external dependencies."""

from .meeting_store import MeetingStore

__all__ = [
    "MeetingStore",
]
