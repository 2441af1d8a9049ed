from __future__ import annotations

from sqlmodel import Session

from campaignos.core.exceptions import NotAuthenticated
from campaignos.core.security import TokenType, decode_subject
from campaignos.models import User
from campaignos.services.permissions import Principal


def load_active_user(
    session: Session, token: str, token_type: TokenType = TokenType.ACCESS
) -> User:
    """Resolve a bearer token to an active user."""
    try:
        user_id = decode_subject(token, token_type)
    except ValueError:
        raise NotAuthenticated("Could not validate credentials") from None

    user = session.get(User, user_id)
    if user is None or not user.is_active:
        raise NotAuthenticated("Inactive or missing user")
    return user


def authenticate(session: Session, token: str) -> Principal:
    return Principal.from_user(load_active_user(session, token))
