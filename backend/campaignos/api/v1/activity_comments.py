from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import select

from campaignos.api.deps import get_current_user, get_principal
from campaignos.db import SessionDep
from campaignos.models import Activity, ActivityComment, Calendar, User, UserRole
from campaignos.schemas import CommentCreate, CommentRead, CommentUpdate
from campaignos.services import notifications
from campaignos.services.permissions import Action, Principal, ResourceKind, require_access

router = APIRouter()

logger = logging.getLogger(__name__)


def _to_read(comment: ActivityComment, user: User | None) -> CommentRead:
    data = CommentRead.model_validate(comment)
    if user:
        data.user_name = user.name
        data.user_email = user.email
        data.user_avatar_url = user.avatar_url
    return data


def _get_activity_or_404(session: SessionDep, activity_id: UUID) -> Activity:
    activity = session.get(Activity, activity_id)
    if not activity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return activity


def _get_own_comment(session: SessionDep, comment_id: UUID, current_user: User) -> ActivityComment:
    comment = session.get(ActivityComment, comment_id)
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != current_user.id and current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only change your own comments",
        )
    return comment


@router.get("/", response_model=List[CommentRead], summary="List comments of an activity")
def list_comments(
    session: SessionDep,
    activity_id: UUID = Query(...),
    principal: Principal = Depends(get_principal),
) -> List[CommentRead]:
    _get_activity_or_404(session, activity_id)
    require_access(session, principal, Action.VIEW, ResourceKind.ACTIVITY, activity_id)

    statement = (
        select(ActivityComment, User)
        .join(User, ActivityComment.user_id == User.id)
        .where(ActivityComment.activity_id == activity_id)
        .order_by(ActivityComment.created_at.asc())
    )
    return [_to_read(comment, user) for comment, user in session.exec(statement).all()]


@router.post(
    "/",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on an activity",
)
def create_comment(
    payload: CommentCreate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
    principal: Principal = Depends(get_principal),
) -> CommentRead:
    activity = _get_activity_or_404(session, payload.activity_id)
    require_access(session, principal, Action.VIEW, ResourceKind.ACTIVITY, activity.id)

    comment = ActivityComment(
        activity_id=activity.id,
        user_id=current_user.id,
        content=payload.content.strip(),
    )
    session.add(comment)
    session.commit()
    session.refresh(comment)

    result = _to_read(comment, current_user)
    calendar = session.get(Calendar, activity.calendar_id)
    if calendar and calendar.owner_id != current_user.id:
        notifications.notify_comment_added(
            session, calendar.owner_id, activity.title, comment.id, current_user
        )
    return result


@router.put("/{comment_id}", response_model=CommentRead, summary="Edit comment")
def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    """Only the author or an Admin may edit."""
    comment = _get_own_comment(session, comment_id, current_user)
    comment.content = payload.content.strip()
    comment.touch()
    session.add(comment)
    session.commit()
    session.refresh(comment)
    return _to_read(comment, session.get(User, comment.user_id))


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
)
def delete_comment(
    comment_id: UUID,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
) -> None:
    comment = _get_own_comment(session, comment_id, current_user)
    session.delete(comment)
    session.commit()
    logger.info("User %s deleted comment %s", current_user.id, comment_id)
