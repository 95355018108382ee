"""Telehealth Application DTOs."""

from .telehealth_dtos import (
    AmendNotesRequest,
    BackendMeeting,
    EnsureMeetingRequest,
    EnsureMeetingResult,
    IngestOutcome,
    IngestResult,
    ReminderRunResult,
    UseCaseResult,
)

__all__ = [
    "AmendNotesRequest",
    "BackendMeeting",
    "EnsureMeetingRequest",
    "EnsureMeetingResult",
    "IngestOutcome",
    "IngestResult",
    "ReminderRunResult",
    "UseCaseResult",
]
