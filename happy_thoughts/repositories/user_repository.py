"""Lookups and inserts for the `users` table."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.models.user import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_user_name(self, user_name: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.user_name == user_name))
        return result.scalar_one_or_none()

    async def find_by_access_token(self, access_token: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.access_token == access_token)
        )
        return result.scalar_one_or_none()

    async def insert(self, user_name: str, password_hash: str, access_token: str) -> User:
        """
        Adds the user and flushes so a unique-index violation (two concurrent
        registrations of one name) raises IntegrityError here, not at commit.
        """
        user = User(
            user_name=user_name,
            password_hash=password_hash,
            access_token=access_token,
        )
        self.session.add(user)
        await self.session.flush()
        return user
