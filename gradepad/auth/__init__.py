"""Authentication utilities."""

__all__ = [
    "CallerContext",
    "JWTManager",
    "TokenData",
    "get_current_caller",
]

from .jwt import JWTManager, TokenData
from .middleware import CallerContext, get_current_caller
