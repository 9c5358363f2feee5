"""
Authentication dependencies for FastAPI route protection.

`get_current_user` is the bearer token check: it resolves the raw
`Authorization` header through a CredentialVerifier and either returns the
user or raises AuthenticationError (401, `{message, loggedOut: true}`).
No session, no refresh, no expiry: every request is checked on its own.
"""

import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.database import get_db_session
from happy_thoughts.exceptions import AuthenticationError, AuthenticationStoreError
from happy_thoughts.models.user import User
from happy_thoughts.repositories.user_repository import UserRepository
from happy_thoughts.services.auth_service import AccessTokenVerifier, CredentialVerifier

logger = logging.getLogger(__name__)


def get_credential_verifier(db: AsyncSession = Depends(get_db_session)) -> CredentialVerifier:
    """Override this dependency to plug in a different credential scheme."""
    return AccessTokenVerifier(UserRepository(db))


async def _resolve(verifier: CredentialVerifier, authorization: Optional[str]) -> Optional[User]:
    try:
        return await verifier.resolve(authorization)
    except SQLAlchemyError as e:
        logger.error("Credential lookup failed: %s", str(e), exc_info=True)
        raise AuthenticationStoreError(error=str(e))


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> User:
    """Dependency returning the caller; 401 when the token is missing or unknown."""
    user = await _resolve(verifier, authorization)
    if user is None:
        raise AuthenticationError()
    return user


async def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> Optional[User]:
    """Like get_current_user, but an anonymous or unknown caller yields None."""
    return await _resolve(verifier, authorization)
