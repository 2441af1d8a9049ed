import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel import select

from campaignos.api.deps import get_current_user
from campaignos.core.config import settings
from campaignos.core.limiter import limiter
from campaignos.core.security import (
    TokenType,
    get_password_hash,
    issue_token_pair,
    verify_password,
)
from campaignos.db import SessionDep
from campaignos.models import User, UserRole
from campaignos.schemas import (
    RefreshTokenRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UserRead,
)
from campaignos.services.identity import load_active_user

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register_user(payload: UserCreate, session: SessionDep) -> User:
    email = payload.email.lower()
    existing = session.exec(select(User).where(User.email == email)).one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is already registered",
        )

    # elevated roles are only assigned through scripts/create_user.py
    user = User(
        email=email,
        name=payload.name,
        avatar_url=payload.avatar_url,
        hashed_password=get_password_hash(payload.password),
        role=UserRole.USER,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


@router.post(
    "/login",
    response_model=TokenPair,
    summary="Login and obtain tokens",
)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, payload: UserLogin, session: SessionDep) -> TokenPair:
    email = payload.email.lower()
    user = session.exec(select(User).where(User.email == email)).one_or_none()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    return TokenPair(**issue_token_pair(user.id))


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh access token",
)
def refresh_tokens(payload: RefreshTokenRequest, session: SessionDep) -> TokenPair:
    """Deactivated users cannot refresh."""
    user = load_active_user(session, payload.refresh_token, TokenType.REFRESH)
    return TokenPair(**issue_token_pair(user.id))


@router.get("/me", response_model=UserRead, summary="Current user profile")
def read_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user
