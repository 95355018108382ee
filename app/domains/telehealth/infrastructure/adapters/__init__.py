"""Default adapters for host collaborators."""

from .encounter_notes import SQLAlchemyEncounterNoteWriter
from .host_logging import LoggingAppointmentStatusGateway, LoggingInviteSender

__all__ = [
    "LoggingAppointmentStatusGateway",
    "LoggingInviteSender",
    "SQLAlchemyEncounterNoteWriter",
]
