"""Route handlers for the API."""

from klystra_agency.api.routes import auth, contact, health, projects, upload

__all__ = [
    "auth",
    "contact",
    "health",
    "projects",
    "upload",
]
