"""Telehealth Domain Services."""

from .clinical_notes import ClinicalNoteFormatter
from .invite import MeetingInvite
from .meeting_link_provider import (
    LinkProviderConfig,
    MeetingLinkProvider,
    MeetingLinks,
    generate_slug,
)
from .reminder_policy import ReminderPolicy, start_of_local_day

__all__ = [
    "ClinicalNoteFormatter",
    "LinkProviderConfig",
    "MeetingInvite",
    "MeetingLinkProvider",
    "MeetingLinks",
    "ReminderPolicy",
    "generate_slug",
    "start_of_local_day",
]
