"""Telehealth Infrastructure Layer."""
