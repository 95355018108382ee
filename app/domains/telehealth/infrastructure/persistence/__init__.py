"""SQLAlchemy persistence for the telehealth domain."""
