"""
Happy Thoughts API — User Service
===================================

What:  Registration and login.
How:   Works on a UserRepository bound to the request session; bcrypt runs in
       a worker thread so hashing does not stall the event loop.

Outcomes:
    register: 200 RegisteredUser | 409 name taken | 400 store failure
    login:    200 LoggedInUser   | 404 unknown name | 401 wrong password
"""

import asyncio
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from happy_thoughts.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from happy_thoughts.repositories.user_repository import UserRepository
from happy_thoughts.schemas.user import LoggedInUser, RegisteredUser
from happy_thoughts.services.auth_service import (
    generate_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

USER_NAME_TAKEN = "User name already exists"


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, user_name: str, password: str) -> RegisteredUser:
        """
        Create a user with a hashed password and a fresh access token.

        Args:
            user_name: already lowercased by the request schema
            password:  plain text, hashed before it reaches the store

        Raises:
            ConflictError:   the name is taken (checked up front, and again by
                             the unique index if two registrations race)
            ValidationError: any other store failure ("Failed to create user")
        """
        try:
            if await self.users.find_by_user_name(user_name) is not None:
                raise ConflictError(USER_NAME_TAKEN, context={"user_name": user_name})

            password_hash = await asyncio.to_thread(hash_password, password)
            user = await self.users.insert(
                user_name=user_name,
                password_hash=password_hash,
                access_token=generate_access_token(),
            )
        except IntegrityError:
            raise ConflictError(USER_NAME_TAKEN, context={"user_name": user_name})
        except SQLAlchemyError as e:
            logger.error("Failed to create user %s: %s", user_name, str(e), exc_info=True)
            raise ValidationError(
                message="Failed to create user",
                context={"error_type": type(e).__name__},
            )

        logger.info("User registered: %s (%s)", user.user_name, user.id)
        return RegisteredUser(id=user.id, access_token=user.access_token)

    async def login(self, user_name: str, password: str) -> LoggedInUser:
        try:
            user = await self.users.find_by_user_name(user_name)
        except SQLAlchemyError as e:
            logger.error("Login lookup failed for %s: %s", user_name, str(e))
            raise DatabaseError(
                message="Failed to log in",
                context={"error_type": type(e).__name__},
            )

        if user is None:
            raise NotFoundError(message="User not found", resource="user")

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("Rejected login for %s: wrong password", user_name)
            raise InvalidCredentialsError()

        return LoggedInUser(id=user.id, user_name=user.user_name, access_token=user.access_token)
