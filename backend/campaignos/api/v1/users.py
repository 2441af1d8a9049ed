from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import EmailStr
from sqlmodel import select

from campaignos.api.deps import get_current_user, get_principal
from campaignos.core.security import get_password_hash, verify_password
from campaignos.db import SessionDep
from campaignos.models import User, UserRole
from campaignos.schemas import ProfileUpdate, UserAdminUpdate, UserRead, UserSummary
from campaignos.services.permissions import Principal

router = APIRouter()

logger = logging.getLogger(__name__)


def _require_elevated(principal: Principal) -> None:
    if not principal.is_elevated:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - Manager or Admin role required",
        )


@router.get("/", response_model=List[UserRead], summary="List users")
def list_users(
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> List[User]:
    _require_elevated(principal)
    return list(session.exec(select(User).order_by(User.created_at.asc())).all())


@router.get("/lookup", response_model=UserSummary, summary="Find a user by email")
def lookup_user(
    session: SessionDep,
    email: EmailStr = Query(...),
    current_user: User = Depends(get_current_user),
) -> User:
    """Open to every signed-in user so invitations can be addressed."""
    user = session.exec(select(User).where(User.email == email.lower())).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/profile", response_model=UserRead, summary="Get own profile")
def read_profile(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.put("/profile", response_model=UserRead, summary="Update own profile")
def update_profile(
    payload: ProfileUpdate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
) -> User:
    """Change name, avatar or password. A new password needs the current one."""
    data = payload.model_dump(exclude_unset=True)
    if not set(data) - {"current_password"}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No changes provided")

    if data.get("name") is not None:
        name = data["name"].strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty"
            )
        current_user.name = name
    if "avatar_url" in data:
        current_user.avatar_url = data["avatar_url"] or None

    if data.get("new_password"):
        if not data.get("current_password"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is required to change password",
            )
        if not verify_password(data["current_password"], current_user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect",
            )
        current_user.hashed_password = get_password_hash(data["new_password"])

    current_user.touch()
    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return current_user


@router.put("/{user_id}", response_model=UserRead, summary="Update user by id")
def update_user(
    user_id: UUID,
    payload: UserAdminUpdate,
    session: SessionDep,
    principal: Principal = Depends(get_principal),
) -> User:
    """Manager/Admin only. Only an Admin may grant or revoke the Admin role."""
    _require_elevated(principal)

    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    data = payload.model_dump(exclude_unset=True)
    new_role = data.get("role")
    if new_role is not None and new_role != user.role:
        touches_admin = UserRole.ADMIN in (UserRole(user.role), new_role)
        if touches_admin and principal.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only an Admin can change Admin roles",
            )
        logger.info(
            "User %s changed role of %s from %s to %s",
            principal.id,
            user.id,
            UserRole(user.role).value,
            new_role.value,
        )
        user.role = new_role

    if data.get("is_active") is False and user.id == principal.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate yourself"
        )
    if data.get("is_active") is not None:
        user.is_active = data["is_active"]
    if data.get("name") is not None:
        user.name = data["name"].strip()

    user.touch()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
