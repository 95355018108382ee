"""Webhook topics sent by the telesalud backend and the notification topics derived from them."""

from enum import Enum

from .meeting_status import MeetingStatus


class NotificationTopic(str, Enum):
    """Topics surfaced to clinicians through the notification store."""

    PATIENT_WAITING = "patient-waiting"
    PROVIDER_JOINED = "provider-joined"
    CONSULTATION_STARTED = "consultation-started"
    PROVIDER_LEFT = "provider-left"
    CONSULTATION_FINISHED = "consultation-finished"
    BACKEND_EVENT = "backend-event"


class WebhookTopic(str, Enum):
    """Lifecycle topics posted by the remote backend."""

    PATIENT_SET_ATTENDANCE = "patient-set-attendance"
    MEDIC_SET_ATTENDANCE = "medic-set-attendance"
    VIDEOCONSULTATION_STARTED = "videoconsultation-started"
    MEDIC_UNSET_ATTENDANCE = "medic-unset-attendance"
    VIDEOCONSULTATION_FINISHED = "videoconsultation-finished"

    @classmethod
    def parse(cls, value: str) -> "WebhookTopic | None":
        """Return the topic for a raw value, or None when the backend sent something new."""
        try:
            return cls(value.strip())
        except ValueError:
            return None

    @property
    def target_status(self) -> MeetingStatus | None:
        """Status the meeting should move to. None means no state change."""
        targets = {
            "patient-set-attendance": MeetingStatus.PATIENT_JOINED,
            "medic-set-attendance": MeetingStatus.PROVIDER_JOINED,
            "videoconsultation-started": MeetingStatus.IN_PROGRESS,
            "medic-unset-attendance": None,
            "videoconsultation-finished": MeetingStatus.FINISHED,
        }
        return targets[self.value]

    @property
    def notification_topic(self) -> NotificationTopic:
        topics = {
            "patient-set-attendance": NotificationTopic.PATIENT_WAITING,
            "medic-set-attendance": NotificationTopic.PROVIDER_JOINED,
            "videoconsultation-started": NotificationTopic.CONSULTATION_STARTED,
            "medic-unset-attendance": NotificationTopic.PROVIDER_LEFT,
            "videoconsultation-finished": NotificationTopic.CONSULTATION_FINISHED,
        }
        return topics[self.value]
