"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- User: Admin accounts with salted password hashes
- ContactMessage: Messages submitted through the public contact form
- WebsiteProject: Portfolio entries for built websites
- VideoProject: Portfolio entries for edited videos
- SocialProject: Portfolio entries for social media campaigns

All models inherit from the shared Base declarative class defined in data.db.
"""

from klystra_agency.data.db import Base
from klystra_agency.data.models.contact_message import ContactMessage
from klystra_agency.data.models.social_project import SocialProject
from klystra_agency.data.models.user import User
from klystra_agency.data.models.video_project import VideoProject
from klystra_agency.data.models.website_project import WebsiteProject

__all__ = [
    "Base",
    "ContactMessage",
    "SocialProject",
    "User",
    "VideoProject",
    "WebsiteProject",
]
