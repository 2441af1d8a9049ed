from __future__ import annotations

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from campaignos.core.config import settings
from campaignos.db import SessionDep
from campaignos.models import User
from campaignos.services.identity import load_active_user
from campaignos.services.permissions import Principal

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_current_user(
    session: SessionDep,
    token: str = Depends(oauth2_scheme),
) -> User:
    return load_active_user(session, token)


def get_principal(current_user: User = Depends(get_current_user)) -> Principal:
    return Principal.from_user(current_user)

