# ============================================================================
# SCOPE: APPLICATION LAYER (Telehealth)
# Description: Host event hooks (appointment created -> ensure meeting).
# ============================================================================
"""
Host Event Hooks.

The host registers {event_name, handler} pairs on its own dispatcher. Payloads
are expected already normalized to a flat dict by the host adapter.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, runtime_checkable

from .dto import EnsureMeetingRequest, EnsureMeetingResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from .use_cases import EnsureMeetingUseCase

logger = logging.getLogger(__name__)

APPOINTMENT_CREATED = "appointment.created"
TELEHEALTH_CATEGORY_KEYWORDS = ("telehealth", "teleconsulta", "telesalud")

EventHandler = Callable[[dict[str, Any]], Awaitable[Any]]


def is_telehealth_category(category_name: str | None) -> bool:
    """Only telehealth appointment categories get a meeting."""
    if not category_name:
        return False
    name = category_name.lower()
    return any(keyword in name for keyword in TELEHEALTH_CATEGORY_KEYWORDS)


@dataclass(frozen=True)
class EventHook:
    event_name: str
    handler: EventHandler


@runtime_checkable
class IEventDispatcher(Protocol):
    """Whatever event system the host uses."""

    def add_listener(self, event_name: str, handler: EventHandler) -> None:
        ...


class TelehealthEventHooks:
    """Binds host events to the ensure meeting use case.

    Each event runs in its own session: commit on success, rollback and
    re-raise on error.
    """

    def __init__(
        self,
        session_factory: "async_sessionmaker[AsyncSession]",
        use_case_factory: Callable[["AsyncSession"], "EnsureMeetingUseCase"],
    ):
        self._session_factory = session_factory
        self._use_case_factory = use_case_factory

    def hooks(self) -> list[EventHook]:
        return [EventHook(APPOINTMENT_CREATED, self.on_appointment_created)]

    def register(self, dispatcher: IEventDispatcher) -> None:
        for hook in self.hooks():
            dispatcher.add_listener(hook.event_name, hook.handler)
            logger.info(f"Registered telehealth hook for {hook.event_name}")

    async def on_appointment_created(self, event: dict[str, Any]) -> EnsureMeetingResult | None:
        if not is_telehealth_category(event.get("category_name")):
            logger.debug(f"Skipping non-telehealth appointment {event.get('appointment_id')}")
            return None

        try:
            request = self.to_request(event)
        except (KeyError, ValueError) as e:
            logger.warning(f"Ignoring malformed appointment event: {e}")
            return None

        async with self._session_factory() as session:
            try:
                result = await self._use_case_factory(session).execute(request)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

        return result

    @staticmethod
    def to_request(event: dict[str, Any]) -> EnsureMeetingRequest:
        """
        Convert a normalized host event into an EnsureMeetingRequest.

        Raises:
            KeyError: Missing appointment id or time
            ValueError: Unparseable or naive appointment time
        """
        appointment_time = event["appointment_time"]
        if isinstance(appointment_time, str):
            appointment_time = datetime.fromisoformat(appointment_time)
        if not isinstance(appointment_time, datetime) or appointment_time.tzinfo is None:
            raise ValueError("appointment_time must be a timezone-aware datetime")

        def optional(key: str) -> str | None:
            value = event.get(key)
            return str(value) if value not in (None, "") else None

        return EnsureMeetingRequest(
            appointment_id=str(event["appointment_id"]),
            provider_name=event.get("provider_name") or "",
            patient_name=event.get("patient_name") or "",
            appointment_time=appointment_time,
            patient_id=optional("patient_id"),
            encounter_id=optional("encounter_id"),
            provider_id=optional("provider_id"),
            patient_phone=optional("patient_phone"),
        )
