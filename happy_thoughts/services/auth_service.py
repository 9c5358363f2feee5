"""
Happy Thoughts API — Credentials
==================================

What:  Password hashing, access token generation, and the bearer credential
       verifier used by the authentication dependency.
Why:   Routes and dependencies only see `CredentialVerifier.resolve()`. The
       current scheme (a static random token stored on the user) can be
       replaced by a signed, expiring token without touching route logic.

Scheme:
    Password:  bcrypt with a per-password random salt (work factor from
               settings.bcrypt_rounds)
    Token:     128 random bytes, hex encoded (256 chars), issued once at
               registration; never rotated or expired
    Header:    `Authorization: <token>`, raw value, no "Bearer " prefix
"""

import logging
import secrets
from abc import ABC, abstractmethod
from typing import Optional

import bcrypt

from happy_thoughts.config import settings
from happy_thoughts.models.user import User
from happy_thoughts.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

ACCESS_TOKEN_BYTES = 128


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt with a fresh salt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plain text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Malformed password hash encountered during login")
        return False


def generate_access_token() -> str:
    return secrets.token_hex(ACCESS_TOKEN_BYTES)


class CredentialVerifier(ABC):
    """
    Resolves the credential presented on a request to a user.

    Contract:
        - returns None for a missing, malformed or unknown credential
        - lets store errors propagate (the dependency maps them to 500)
    """

    @abstractmethod
    async def resolve(self, credential: Optional[str]) -> Optional[User]:
        ...


class AccessTokenVerifier(CredentialVerifier):
    """Exact match of the presented token against `users.access_token`."""

    def __init__(self, users: UserRepository):
        self.users = users

    async def resolve(self, credential: Optional[str]) -> Optional[User]:
        if not credential:
            return None
        return await self.users.find_by_access_token(credential.strip())
