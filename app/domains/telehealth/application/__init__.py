"""
Telehealth Application Layer

Use cases, ports and DTOs for the meeting bridge.
"""
