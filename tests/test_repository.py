"""Tests for the repository over the embedded database."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from klystra_agency.data.db import Database
from klystra_agency.data.repository import EntityType, Repository
from klystra_agency.errors import ConflictError, InternalError
from klystra_agency.services.auth import hash_password


def _website(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "title": "TechStyle E-commerce",
        "description": "Modern e-commerce platform",
        "image": "/uploads/techstyle-1700000000000.png",
        "demo_url": "https://techstyle.example",
        "github_url": "https://github.com/klystra/techstyle",
        "tags": ["React", "Node.js"],
        "order": "1",
    }
    payload.update(overrides)
    return payload


def _social() -> dict[str, object]:
    return {
        "platform": "Instagram",
        "title": "Fashion Brand Growth",
        "description": "Grew an apparel brand's following",
        "icon": "instagram",
        "image": "/uploads/fashion.jpg",
        "images": ["/uploads/a.jpg", "/uploads/b.jpg"],
        "videos": [{"url": "https://youtu.be/x", "title": "Reel"}],
        "metrics": {"Followers": "+250%", "Engagement": "8.5%"},
        "reach": "2.5M",
        "engagement": "8.5%",
    }


class TestCreateAndGet:
    def test_create_generates_id_and_timestamp(self, repository: Repository) -> None:
        row = repository.create(EntityType.WEBSITE_PROJECT, _website())

        assert row.id
        assert row.created_at is not None
        assert row.title == "TechStyle E-commerce"
        assert row.tags == ["React", "Node.js"]

    def test_client_supplied_id_and_timestamp_are_ignored(self, repository: Repository) -> None:
        row = repository.create(
            EntityType.WEBSITE_PROJECT, _website(id="chosen-id", created_at="yesterday")
        )
        assert row.id != "chosen-id"

    def test_ids_are_unique(self, repository: Repository) -> None:
        ids = {repository.create(EntityType.WEBSITE_PROJECT, _website()).id for _ in range(5)}
        assert len(ids) == 5

    def test_get_returns_stored_row(self, repository: Repository) -> None:
        created = repository.create(EntityType.SOCIAL_PROJECT, _social())

        fetched = repository.get(EntityType.SOCIAL_PROJECT, created.id)

        assert fetched is not None
        assert fetched.metrics == {"Followers": "+250%", "Engagement": "8.5%"}
        assert fetched.images == ["/uploads/a.jpg", "/uploads/b.jpg"]
        assert fetched.videos == [{"url": "https://youtu.be/x", "title": "Reel"}]
        assert fetched.lead_count is None

    def test_get_missing_returns_none(self, repository: Repository) -> None:
        assert repository.get(EntityType.VIDEO_PROJECT, "missing") is None

    def test_entity_types_do_not_share_rows(self, repository: Repository) -> None:
        created = repository.create(EntityType.WEBSITE_PROJECT, _website())
        assert repository.get(EntityType.VIDEO_PROJECT, created.id) is None


class TestList:
    def test_list_empty(self, repository: Repository) -> None:
        assert repository.list(EntityType.WEBSITE_PROJECT) == []

    def test_list_keeps_insertion_order(self, repository: Repository) -> None:
        for title in ("b", "c", "a"):
            repository.create(EntityType.WEBSITE_PROJECT, _website(title=title, order="9"))

        titles = [row.title for row in repository.list(EntityType.WEBSITE_PROJECT)]

        assert titles == ["b", "c", "a"]


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, repository: Repository) -> None:
        created = repository.create(EntityType.WEBSITE_PROJECT, _website())

        updated = repository.update(
            EntityType.WEBSITE_PROJECT, created.id, {"description": "Rebuilt storefront"}
        )

        assert updated is not None
        assert updated.description == "Rebuilt storefront"
        assert updated.title == created.title
        assert updated.tags == created.tags
        assert updated.order == created.order
        assert updated.created_at == created.created_at

    def test_update_cannot_change_id(self, repository: Repository) -> None:
        created = repository.create(EntityType.WEBSITE_PROJECT, _website())

        updated = repository.update(EntityType.WEBSITE_PROJECT, created.id, {"id": "new-id"})

        assert updated is not None
        assert updated.id == created.id

    def test_update_missing_returns_none(self, repository: Repository) -> None:
        assert repository.update(EntityType.VIDEO_PROJECT, "missing", {"title": "x"}) is None

    def test_nullable_field_can_be_cleared(self, repository: Repository) -> None:
        created = repository.create(EntityType.SOCIAL_PROJECT, _social())

        updated = repository.update(EntityType.SOCIAL_PROJECT, created.id, {"videos": None})

        assert updated is not None
        assert updated.videos is None


class TestDelete:
    def test_delete_existing(self, repository: Repository) -> None:
        created = repository.create(EntityType.WEBSITE_PROJECT, _website())

        assert repository.delete(EntityType.WEBSITE_PROJECT, created.id) is True
        assert repository.get(EntityType.WEBSITE_PROJECT, created.id) is None

    def test_delete_missing_returns_false(self, repository: Repository) -> None:
        assert repository.delete(EntityType.WEBSITE_PROJECT, "missing") is False


class TestUsers:
    def test_create_and_look_up_user(self, repository: Repository) -> None:
        user = repository.create_user("admin", hash_password("pw"), is_admin=True)

        assert user.is_admin == "true"
        assert repository.get_user(user.id).username == "admin"
        assert repository.get_user_by_username("admin").id == user.id

    def test_users_default_to_non_admin(self, repository: Repository) -> None:
        user = repository.create_user("editor", hash_password("pw"))
        assert user.is_admin == "false"

    def test_duplicate_username_conflicts_and_keeps_original(
        self, repository: Repository
    ) -> None:
        original = repository.create_user("admin", hash_password("first"))

        with pytest.raises(ConflictError):
            repository.create_user("admin", hash_password("second"))

        stored = repository.get_user_by_username("admin")
        assert stored.id == original.id
        assert stored.password_hash == original.password_hash

    def test_unknown_user_lookups_return_none(self, repository: Repository) -> None:
        assert repository.get_user("missing") is None
        assert repository.get_user_by_username("nobody") is None


def test_malformed_json_column_decodes_to_empty(repository: Repository) -> None:
    created = repository.create(EntityType.WEBSITE_PROJECT, _website())
    with repository.database.session() as session:
        session.execute(
            text("UPDATE website_projects SET tags = :tags WHERE id = :id"),
            {"tags": "React, Node", "id": created.id},
        )

    fetched = repository.get(EntityType.WEBSITE_PROJECT, created.id)

    assert fetched.tags == []


def test_storage_failure_becomes_internal_error(tmp_path: Path) -> None:
    database = Database(f"sqlite:///{(tmp_path / 'empty.db').as_posix()}")
    repository = Repository(database)  # tables never created

    with pytest.raises(InternalError) as exc_info:
        repository.list(EntityType.CONTACT_MESSAGE)

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.message == "Internal server error"
    database.dispose()


def test_in_memory_database_is_shared_across_sessions() -> None:
    database = Database("sqlite://")
    database.create_all()
    repository = Repository(database)

    created = repository.create(
        EntityType.VIDEO_PROJECT,
        {
            "title": "Launch",
            "description": "Promo",
            "duration": "3:45 min",
            "quality": "4K",
            "thumbnail": "/uploads/thumb.jpg",
            "video_url": "https://www.youtube.com/embed/abc",
            "category": "Promotional",
        },
    )

    assert repository.get(EntityType.VIDEO_PROJECT, created.id).order == "0"
    database.dispose()


def test_timestamps_are_read_back_in_utc(repository: Repository) -> None:
    created = repository.create(EntityType.WEBSITE_PROJECT, _website())

    fetched = repository.get(EntityType.WEBSITE_PROJECT, created.id)

    assert fetched.created_at.tzinfo is not None
    assert fetched.created_at.utcoffset() == timedelta(0)
    assert fetched.created_at == created.created_at
