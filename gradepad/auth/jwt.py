"""Bearer tokens identifying the caller of the grading API."""

from __future__ import annotations

import datetime
import typing as t

import annotated_types as ant
import jwt
import pydantic as p

from gradepad.core import di
from gradepad.model import PersonID


class TokenPayload(t.TypedDict):
    """JWT token payload structure."""

    sub: str  # person_id of the caller
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp


class TokenData(t.NamedTuple):
    """Decoded token data."""

    caller_id: PersonID
    expires_at: datetime.datetime
    issued_at: datetime.datetime


class JWTManager(object):
    """Manages JWT token creation and validation."""

    _secret_key: p.Secret[str]
    _algorithm: t.Literal["HS256"]
    _access_token_expire_minutes: t.Annotated[int, ant.Gt(1)]

    def __init__(
        self,
        secret_key: p.Secret[str],
        algorithm: t.Literal["HS256"] = "HS256",
        access_token_expire_minutes: t.Annotated[int, ant.Gt(1)] = 30,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_token_expire_minutes = access_token_expire_minutes

    @property
    def secret_key(self) -> str:
        return self._secret_key.get_secret_value()

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def create_access_token(self, caller_id: PersonID, expires_delta: datetime.timedelta | None = None) -> str:
        """Create a new access token for ``caller_id``.

        The default lifetime is ``access_token_expire_minutes``.
        """
        now = datetime.datetime.now(datetime.UTC)
        if expires_delta is None:
            expires_delta = datetime.timedelta(minutes=self._access_token_expire_minutes)

        payload: TokenPayload = {
            "sub": str(caller_id),
            "exp": int((now + expires_delta).timestamp()),
            "iat": int(now.timestamp()),
        }
        return jwt.encode(dict(payload), self.secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenData | None:
        """Decode and validate a token, returning None if it is invalid or expired."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self._algorithm])
            return TokenData(
                caller_id=PersonID(int(payload["sub"])),
                expires_at=datetime.datetime.fromtimestamp(payload["exp"], tz=datetime.UTC),
                issued_at=datetime.datetime.fromtimestamp(payload["iat"], tz=datetime.UTC),
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        except (KeyError, ValueError):
            # well-signed but malformed payload
            return None


@di.inject
def decode_token(token: str, jwt_manager: JWTManager = di.Provide["auth.jwt_manager"]) -> TokenData | None:
    return jwt_manager.decode_token(token)


@di.inject
def create_access_token(
    caller_id: PersonID,
    expires_delta: datetime.timedelta | None = None,
    jwt_manager: JWTManager = di.Provide["auth.jwt_manager"],
) -> str:
    return jwt_manager.create_access_token(caller_id, expires_delta)
