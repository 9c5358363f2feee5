"""
Happy Thoughts API — User Request/Response Schemas
====================================================

What:  Bodies of POST /users and POST /users/login and their responses.
Security:
    Responses never include the password or its hash. The access token is
    returned on register and login only.
"""

import uuid

from pydantic import Field, field_validator

from happy_thoughts.schemas.thought import CamelModel

# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


class Credentials(CamelModel):
    """`{userName, password}`; both required and non-empty."""

    user_name: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)

    @field_validator("user_name")
    @classmethod
    def normalize_user_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("User name and password are required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_size(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
        return v


class RegisteredUser(CamelModel):
    id: uuid.UUID
    access_token: str


class LoggedInUser(CamelModel):
    id: uuid.UUID
    user_name: str
    access_token: str
