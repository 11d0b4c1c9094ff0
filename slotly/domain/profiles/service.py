"""Profile service - Business logic for profile operations"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import NotFound, ValidationFailed
from ...models import Profile
from .repository import ProfileRepository
from .schemas import ProfileUpdate, PublicProfile

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_own_profile(self, identity: Identity) -> Profile:
        profile = self.repo.get_profile(self.db, identity.user_id)
        if not profile:
            raise NotFound("Profile not found")
        return profile

    def ensure_profile(self, identity: Identity) -> Profile:
        """Find or create the caller's profile row"""
        profile = self.repo.get_profile(self.db, identity.user_id)
        if profile:
            return profile

        logger.info(f"🆕 Creating profile for user {identity.user_id}")
        try:
            return self.repo.create_profile(
                self.db,
                identity.user_id,
                full_name=identity.full_name,
                avatar_url=identity.avatar_url,
            )
        except IntegrityError:
            # Created concurrently by another request
            profile = self.repo.get_profile(self.db, identity.user_id)
            if profile:
                return profile
            raise

    def update_own_profile(self, identity: Identity, data: ProfileUpdate) -> Profile:
        profile = self.get_own_profile(identity)
        try:
            return self.repo.update_profile(
                self.db,
                profile,
                username=data.username,
                full_name=data.full_name,
                timezone=data.timezone,
                locale=data.locale,
            )
        except IntegrityError as e:
            logger.info(f"Username {data.username!r} already taken")
            raise ValidationFailed(
                [{"path": ["username"], "message": "Username is already taken"}]
            ) from e

    def get_public_profile(self, username: str) -> Optional[PublicProfile]:
        """Public read path: exposes display fields only"""
        profile = self.repo.get_profile_by_username(self.db, username)
        if not profile:
            return None
        return PublicProfile.model_validate(profile)
