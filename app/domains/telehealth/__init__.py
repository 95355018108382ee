"""
Telehealth Domain

Bridges appointments to videoconference backends and relays consultation
lifecycle webhooks back into encounter notes and clinician notifications.
"""
