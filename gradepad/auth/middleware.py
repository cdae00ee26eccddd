"""Caller identity for FastAPI routes."""

from __future__ import annotations

import typing as t

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gradepad.grading.errors import Unauthorized
from gradepad.model import PersonID

from . import jwt as jwt_auth
from .jwt import TokenData

# Security scheme for JWT bearer tokens
bearer_scheme = HTTPBearer(auto_error=False)


class CallerContext(t.NamedTuple):
    """The authenticated caller. Whether they may grade a given activity is the grading policy's call."""

    caller_id: PersonID
    token_data: TokenData


def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CallerContext:
    """Dependency resolving the bearer token to a caller.

    Raises:
        HTTPException 401: If no token provided or token is invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=Unauthorized("Not authenticated").detail(),
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = jwt_auth.decode_token(credentials.credentials)
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=Unauthorized("Invalid or expired token").detail(),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CallerContext(caller_id=token_data.caller_id, token_data=token_data)
