"""
Unit tests for the meeting status machine and webhook topic mapping.
"""

import pytest

from app.domains.telehealth.domain.value_objects import MeetingStatus, NotificationTopic, WebhookTopic


@pytest.mark.unit
class TestMeetingStatusTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (MeetingStatus.SCHEDULED, MeetingStatus.PROVIDER_JOINED),
            (MeetingStatus.SCHEDULED, MeetingStatus.PATIENT_JOINED),
            (MeetingStatus.PROVIDER_JOINED, MeetingStatus.IN_PROGRESS),
            (MeetingStatus.PATIENT_JOINED, MeetingStatus.IN_PROGRESS),
            (MeetingStatus.IN_PROGRESS, MeetingStatus.FINISHED),
            (MeetingStatus.SCHEDULED, MeetingStatus.IN_PROGRESS),
            (MeetingStatus.SCHEDULED, MeetingStatus.FINISHED),
        ],
    )
    def test_forward_transitions_allowed(self, current, target):
        assert current.can_transition_to(target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (MeetingStatus.IN_PROGRESS, MeetingStatus.PATIENT_JOINED),
            (MeetingStatus.IN_PROGRESS, MeetingStatus.SCHEDULED),
            (MeetingStatus.PROVIDER_JOINED, MeetingStatus.PATIENT_JOINED),
            (MeetingStatus.PATIENT_JOINED, MeetingStatus.PROVIDER_JOINED),
            (MeetingStatus.SCHEDULED, MeetingStatus.SCHEDULED),
        ],
    )
    def test_backward_and_sideways_transitions_rejected(self, current, target):
        assert not current.can_transition_to(target)

    def test_finished_is_terminal(self):
        assert MeetingStatus.FINISHED.is_final()
        assert all(not MeetingStatus.FINISHED.can_transition_to(s) for s in MeetingStatus)

    def test_predecessors_of_in_progress(self):
        assert set(MeetingStatus.IN_PROGRESS.predecessors()) == {
            MeetingStatus.SCHEDULED,
            MeetingStatus.PROVIDER_JOINED,
            MeetingStatus.PATIENT_JOINED,
        }

    def test_predecessors_of_finished_exclude_finished(self):
        assert MeetingStatus.FINISHED not in MeetingStatus.FINISHED.predecessors()
        assert len(MeetingStatus.FINISHED.predecessors()) == 4

    def test_scheduled_has_no_predecessors(self):
        assert MeetingStatus.SCHEDULED.predecessors() == []


@pytest.mark.unit
class TestWebhookTopic:
    def test_parse_known_topic(self):
        assert WebhookTopic.parse(" medic-set-attendance ") is WebhookTopic.MEDIC_SET_ATTENDANCE

    def test_parse_unknown_topic_returns_none(self):
        assert WebhookTopic.parse("videoconsultation-recording-ready") is None

    def test_unset_attendance_has_no_target_status(self):
        assert WebhookTopic.MEDIC_UNSET_ATTENDANCE.target_status is None

    @pytest.mark.parametrize(
        "topic,status,notification",
        [
            (WebhookTopic.PATIENT_SET_ATTENDANCE, MeetingStatus.PATIENT_JOINED, NotificationTopic.PATIENT_WAITING),
            (WebhookTopic.MEDIC_SET_ATTENDANCE, MeetingStatus.PROVIDER_JOINED, NotificationTopic.PROVIDER_JOINED),
            (WebhookTopic.VIDEOCONSULTATION_STARTED, MeetingStatus.IN_PROGRESS, NotificationTopic.CONSULTATION_STARTED),
            (WebhookTopic.VIDEOCONSULTATION_FINISHED, MeetingStatus.FINISHED, NotificationTopic.CONSULTATION_FINISHED),
        ],
    )
    def test_topic_mapping(self, topic, status, notification):
        assert topic.target_status is status
        assert topic.notification_topic is notification
