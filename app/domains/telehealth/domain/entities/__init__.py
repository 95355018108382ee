"""Telehealth Domain Entities."""

from .meeting import UNKNOWN_PATIENT, MeetingRecord
from .notification import NotificationEvent

__all__ = [
    "MeetingRecord",
    "NotificationEvent",
    "UNKNOWN_PATIENT",
]
