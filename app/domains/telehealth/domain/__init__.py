"""
Telehealth Domain Layer

Meetings, notifications, their lifecycle rules and the local link provider.
"""

from .entities import MeetingRecord, NotificationEvent
from .exceptions import (
    BackendError,
    BackendRejected,
    BackendUnavailable,
    ConfigurationMissing,
    InvalidPayload,
    MalformedResponse,
    MeetingRecordNotFound,
    NotFound,
    RouteNotFound,
    TelehealthError,
    UnknownMeeting,
)
from .value_objects import LinkProvider, MeetingStatus, NotificationTopic, WebhookTopic

__all__ = [
    "BackendError",
    "BackendRejected",
    "BackendUnavailable",
    "ConfigurationMissing",
    "InvalidPayload",
    "LinkProvider",
    "MalformedResponse",
    "MeetingRecord",
    "MeetingRecordNotFound",
    "MeetingStatus",
    "NotFound",
    "NotificationEvent",
    "NotificationTopic",
    "RouteNotFound",
    "TelehealthError",
    "UnknownMeeting",
    "WebhookTopic",
]
