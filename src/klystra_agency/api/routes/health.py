"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from klystra_agency.api.dependencies import RepositoryDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(repository: RepositoryDep) -> dict[str, str]:
    """Return the current status of the API and its database."""
    with repository.database.session() as session:
        session.execute(text("SELECT 1"))
    return {"status": "ok"}
