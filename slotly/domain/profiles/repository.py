"""Profile repository - Database operations for profiles"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == user_id).first()

    @staticmethod
    def get_profile_by_username(db: Session, username: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.username == username).first()

    @staticmethod
    def create_profile(db: Session, user_id: str, **profile_data) -> Profile:
        profile = Profile(id=user_id, **profile_data)
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(profile)
        return profile

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        for key, value in updates.items():
            if hasattr(profile, key):
                setattr(profile, key, value)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(profile)
        return profile
