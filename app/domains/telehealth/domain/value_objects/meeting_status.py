"""Meeting Status Value Object.

Lifecycle of a telehealth videoconference and its (monotonic) transitions.
"""

from enum import Enum


class MeetingStatus(str, Enum):
    """Estados de la videoconsulta."""

    SCHEDULED = "scheduled"
    PROVIDER_JOINED = "provider_joined"
    PATIENT_JOINED = "patient_joined"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"

    @property
    def display_name(self) -> str:
        names = {
            "scheduled": "Scheduled",
            "provider_joined": "Provider joined",
            "patient_joined": "Patient waiting",
            "in_progress": "In progress",
            "finished": "Finished",
        }
        return names.get(self.value, self.value)

    @property
    def rank(self) -> int:
        """Position in the lifecycle. Both attendance states share a rank."""
        ranks = {
            "scheduled": 0,
            "provider_joined": 1,
            "patient_joined": 1,
            "in_progress": 2,
            "finished": 3,
        }
        return ranks[self.value]

    def can_transition_to(self, new_status: "MeetingStatus") -> bool:
        """Validar si la transición de estado es válida.

        State machine:
        - scheduled -> provider_joined | patient_joined -> in_progress -> finished
        - forward skips are allowed (a meeting may start without attendance signals)
        - finished -> (final state)
        """
        if self.is_final():
            return False
        return new_status.rank > self.rank

    def predecessors(self) -> list["MeetingStatus"]:
        """Statuses from which this one can be reached."""
        return [status for status in MeetingStatus if status.can_transition_to(self)]

    def is_final(self) -> bool:
        return self is MeetingStatus.FINISHED
