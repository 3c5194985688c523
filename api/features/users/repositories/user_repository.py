"""User repository using base repository pattern."""
from typing import List, Optional, Sequence

from sqlalchemy import or_, select

from api.features.users.entities.user import Role, User
from api.shared.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user lookups needed by messaging."""

    model = User

    async def search(
        self, query: str, *, exclude_id: str, limit: int = 20
    ) -> List[User]:
        """Find users whose name or email contains ``query`` (case-insensitive)."""
        stmt = (
            select(User)
            .where(User.id != exclude_id)
            .where(
                or_(
                    User.name.icontains(query, autoescape=True),
                    User.email.icontains(query, autoescape=True),
                )
            )
            .order_by(User.name.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def first_with_role(self, roles: Sequence[Role]) -> Optional[User]:
        """Get the oldest user holding any of ``roles``."""
        stmt = (
            select(User)
            .where(User.role.in_(list(roles)))
            .order_by(User.created_at.asc(), User.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
