"""
FastAPI dependencies: the caller's identity and request-scoped services.
"""

from .auth import get_credential_verifier, get_current_user, get_optional_user
from .services import get_thought_service, get_user_service

__all__ = [
    "get_credential_verifier",
    "get_current_user",
    "get_optional_user",
    "get_thought_service",
    "get_user_service",
]
