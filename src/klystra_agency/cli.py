"""Command line helper that seeds the admin account."""

from __future__ import annotations

import logging
import sys

from klystra_agency.config import Settings
from klystra_agency.data.db import Database
from klystra_agency.data.repository import Repository
from klystra_agency.errors import AppError
from klystra_agency.services.auth import create_user

logger = logging.getLogger(__name__)


def create_admin(settings: Settings | None = None) -> int:
    """Create the admin user from ``ADMIN_USERNAME`` / ``ADMIN_PASSWORD``.

    An existing user with that name is reported and left untouched.

    Returns:
        Exit code (0 for success or already present, 1 for failure).
    """
    settings = settings or Settings.from_env()
    database = Database(settings.database_url)
    try:
        database.create_all()
        repository = Repository(database)
        username = settings.admin_username.strip()

        if repository.get_user_by_username(username) is not None:
            print(f"Admin user '{username}' already exists")
            return 0

        create_user(repository, username, settings.admin_password, is_admin=True)
    except AppError as exc:
        print(f"Error creating admin: {exc.message}", file=sys.stderr)
        return 1
    finally:
        database.dispose()

    print(f"Admin user '{username}' created. Change the password after first login.")
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(create_admin())


if __name__ == "__main__":
    main()
