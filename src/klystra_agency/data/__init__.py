"""Persistence layer: engine/session handling, ORM models and the repository."""
