"""Portfolio project routes.

Reads are public; create, update and delete require an admin session.
The three project types share one set of handlers built by
``_build_project_router``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Path, status
from pydantic import BaseModel

from klystra_agency.api.dependencies import AdminDep, JsonPayload, RepositoryDep
from klystra_agency.api.schemas.auth import SuccessResponse
from klystra_agency.api.schemas.common import parse_payload
from klystra_agency.api.schemas.projects import (
    ProjectCatalogResponse,
    SocialProjectCreate,
    SocialProjectResponse,
    SocialProjectUpdate,
    VideoProjectCreate,
    VideoProjectResponse,
    VideoProjectUpdate,
    WebsiteProjectCreate,
    WebsiteProjectResponse,
    WebsiteProjectUpdate,
)
from klystra_agency.data.repository import EntityType
from klystra_agency.errors import NotFoundError

router = APIRouter(prefix="/projects", tags=["projects"])

_NOT_FOUND = {404: {"description": "Project not found"}}

ProjectId = Annotated[str, Path(description="Project ID")]


@dataclass(frozen=True)
class ProjectSchemas:
    entity_type: EntityType
    create: type[BaseModel]
    update: type[BaseModel]
    response: type[BaseModel]


PROJECT_SCHEMAS = (
    ProjectSchemas(
        EntityType.WEBSITE_PROJECT,
        WebsiteProjectCreate,
        WebsiteProjectUpdate,
        WebsiteProjectResponse,
    ),
    ProjectSchemas(
        EntityType.VIDEO_PROJECT,
        VideoProjectCreate,
        VideoProjectUpdate,
        VideoProjectResponse,
    ),
    ProjectSchemas(
        EntityType.SOCIAL_PROJECT,
        SocialProjectCreate,
        SocialProjectUpdate,
        SocialProjectResponse,
    ),
)


@router.get("", response_model=ProjectCatalogResponse)
def list_all_projects(repository: RepositoryDep) -> ProjectCatalogResponse:
    """Return every project grouped by type."""
    return ProjectCatalogResponse(
        website=[
            WebsiteProjectResponse.model_validate(row)
            for row in repository.list(EntityType.WEBSITE_PROJECT)
        ],
        video=[
            VideoProjectResponse.model_validate(row)
            for row in repository.list(EntityType.VIDEO_PROJECT)
        ],
        social=[
            SocialProjectResponse.model_validate(row)
            for row in repository.list(EntityType.SOCIAL_PROJECT)
        ],
    )


def _build_project_router(schemas: ProjectSchemas) -> APIRouter:
    kind = schemas.entity_type
    response_model = schemas.response
    sub_router = APIRouter(prefix=f"/{kind.value}")

    @sub_router.get(
        "",
        response_model=list[response_model],
        summary=f"List {kind.value} projects",
    )
    def list_projects(repository: RepositoryDep) -> list[BaseModel]:
        return [response_model.model_validate(row) for row in repository.list(kind)]

    @sub_router.get(
        "/{project_id}",
        response_model=response_model,
        summary=f"Get a {kind.value} project",
        responses=_NOT_FOUND,
    )
    def get_project(project_id: ProjectId, repository: RepositoryDep) -> BaseModel:
        row = repository.get(kind, project_id)
        if row is None:
            raise NotFoundError("Project not found")
        return response_model.model_validate(row)

    @sub_router.post(
        "",
        response_model=response_model,
        summary=f"Create a {kind.value} project",
        responses={400: {"description": "Invalid data"}},
    )
    def create_project(
        _admin: AdminDep,
        payload: JsonPayload,
        repository: RepositoryDep,
    ) -> BaseModel:
        data = parse_payload(schemas.create, payload)
        row = repository.create(kind, data.model_dump())
        return response_model.model_validate(row)

    @sub_router.put(
        "/{project_id}",
        response_model=response_model,
        summary=f"Update a {kind.value} project",
        description="Partial update: omitted fields keep their stored value.",
        responses={400: {"description": "Invalid data"}, **_NOT_FOUND},
    )
    def update_project(
        _admin: AdminDep,
        project_id: ProjectId,
        payload: JsonPayload,
        repository: RepositoryDep,
    ) -> BaseModel:
        changes = parse_payload(schemas.update, payload).model_dump(exclude_unset=True)
        row = repository.update(kind, project_id, changes)
        if row is None:
            raise NotFoundError("Project not found")
        return response_model.model_validate(row)

    @sub_router.delete(
        "/{project_id}",
        response_model=SuccessResponse,
        status_code=status.HTTP_200_OK,
        summary=f"Delete a {kind.value} project",
        responses=_NOT_FOUND,
    )
    def delete_project(
        _admin: AdminDep,
        project_id: ProjectId,
        repository: RepositoryDep,
    ) -> SuccessResponse:
        if not repository.delete(kind, project_id):
            raise NotFoundError("Project not found")
        return SuccessResponse(message="Project deleted")

    return sub_router


for _schemas in PROJECT_SCHEMAS:
    router.include_router(
        _build_project_router(_schemas), tags=[f"{_schemas.entity_type.value} projects"]
    )
