"""Per-request service construction, bound to the request's database session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.database import get_db_session
from happy_thoughts.repositories.thought_repository import SqlThoughtRepository
from happy_thoughts.repositories.user_repository import UserRepository
from happy_thoughts.services.thought_service import ThoughtService
from happy_thoughts.services.user_service import UserService


def get_thought_service(db: AsyncSession = Depends(get_db_session)) -> ThoughtService:
    return ThoughtService(SqlThoughtRepository(db))


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(UserRepository(db))
