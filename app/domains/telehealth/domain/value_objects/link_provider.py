"""Meeting link providers."""

from enum import Enum


class LinkProvider(str, Enum):
    """Where a meeting's join links come from."""

    TELESALUD = "telesalud"
    JITSI = "jitsi"
    GOOGLE_MEET = "google_meet"
    DOXY_ME = "doxy_me"
    DOXIMITY = "doximity"
    TEMPLATE = "template"

    @property
    def is_local(self) -> bool:
        """Local providers build links without calling the remote backend."""
        return self is not LinkProvider.TELESALUD

    @property
    def display_name(self) -> str:
        names = {
            "telesalud": "Telesalud",
            "jitsi": "Jitsi Meet",
            "google_meet": "Google Meet",
            "doxy_me": "Doxy.me",
            "doximity": "Doximity",
            "template": "Custom template",
        }
        return names.get(self.value, self.value)
