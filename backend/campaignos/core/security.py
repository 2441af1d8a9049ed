from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from campaignos.core.config import settings

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type is TokenType.REFRESH:
        return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_token(subject: UUID | str, token_type: TokenType) -> str:
    issued_at = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": str(subject),
        "type": token_type.value,
        "iat": issued_at,
        "exp": issued_at + _lifetime(token_type),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: UUID | str) -> str:
    return create_token(subject, TokenType.ACCESS)


def create_refresh_token(subject: UUID | str) -> str:
    return create_token(subject, TokenType.REFRESH)


def issue_token_pair(subject: UUID | str) -> Dict[str, str]:
    return {
        "access_token": create_access_token(subject),
        "refresh_token": create_refresh_token(subject),
    }


def decode_subject(token: str, token_type: TokenType = TokenType.ACCESS) -> UUID:
    """Return the user id carried by a token of the expected type.

    Raises ``ValueError`` for a bad signature, an expired token, a token of
    the other type or a subject that is not a UUID.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc

    if claims.get("type") != token_type.value:
        raise ValueError(f"Expected a {token_type.value} token")
    try:
        return UUID(str(claims["sub"]))
    except (KeyError, ValueError) as exc:
        raise ValueError("Invalid token subject") from exc


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash in the database
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=12)).decode("utf-8")
