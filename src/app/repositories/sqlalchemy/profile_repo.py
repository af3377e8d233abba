"""SQLAlchemy implementation of ProfileRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from app.domain.models import Profile
from app.repositories.sqlalchemy.orm_models import ProfileORM, ProfileSectorWeightORM


class SqlAlchemyProfileRepository:
    """SQLAlchemy-backed profile repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, profile: Profile) -> Profile:
        """Persist a new profile with its target weights."""
        orm_profile = ProfileORM(
            profile_id=profile.profile_id or None,
            name=profile.name,
            weights=[
                ProfileSectorWeightORM(sector_name=sector, percentage=percentage)
                for sector, percentage in profile.target_weights.items()
            ],
        )
        self._db.add(orm_profile)
        self._db.flush()
        return self._to_domain(orm_profile)

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        """Retrieve profile by ID."""
        orm_profile = self._db.query(ProfileORM).filter(
            ProfileORM.profile_id == profile_id
        ).first()
        return self._to_domain(orm_profile) if orm_profile else None

    def get_by_name(self, name: str) -> Optional[Profile]:
        """Retrieve profile by name."""
        orm_profile = self._db.query(ProfileORM).filter(ProfileORM.name == name).first()
        return self._to_domain(orm_profile) if orm_profile else None

    @staticmethod
    def _to_domain(orm: ProfileORM) -> Profile:
        """Convert ORM model to domain model."""
        return Profile(
            profile_id=orm.profile_id,
            name=orm.name,
            target_weights={w.sector_name: w.percentage for w in orm.weights},
        )
