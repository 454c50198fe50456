"""
Repository per UserProfile.
"""
from typing import List

from sqlalchemy.orm import joinedload

from app.models import UserProfile
from app.repositories.base import SqlAlchemyRepository


class UserProfileRepository(SqlAlchemyRepository[UserProfile]):
    def __init__(self, session):
        super().__init__(session, UserProfile)

    def list_with_roles(self) -> List[UserProfile]:
        return (
            self.session.query(UserProfile)
            .options(joinedload(UserProfile.role))
            .order_by(UserProfile.first_name.asc(), UserProfile.id.asc())
            .all()
        )
