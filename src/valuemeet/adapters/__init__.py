"""Adapters - I/O implementations of ports."""

from .meeting_api import MeetingApiAdapter, StoreError

__all__ = [
    "MeetingApiAdapter",
    "StoreError",
]
