"""Global lookup lists shared by every calendar: activity types and vendors.

Any signed-in user can read them; only Manager/Admin can change them.
Deleting an entry clears it from the activities that used it.
"""

from __future__ import annotations

import logging
from typing import List, Type, Union
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from campaignos.api.deps import get_current_user, get_principal
from campaignos.db import SessionDep
from campaignos.models import ActivityType, User, Vendor
from campaignos.schemas import CatalogEntryCreate, CatalogEntryRead, CatalogEntryUpdate
from campaignos.services.permissions import Principal

logger = logging.getLogger(__name__)

CatalogModel = Union[ActivityType, Vendor]


def _save(session: Session, entry: CatalogModel, label: str) -> None:
    session.add(entry)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{label} with this name already exists",
        ) from None
    session.refresh(entry)


def make_catalog_router(model: Type[CatalogModel], label: str) -> APIRouter:
    router = APIRouter()

    def get_or_404(session: Session, entry_id: UUID) -> CatalogModel:
        entry = session.get(model, entry_id)
        if not entry:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return entry

    def require_elevated(principal: Principal) -> None:
        if not principal.is_elevated:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only Managers and Admins can change {label.lower()} entries",
            )

    @router.get("/", response_model=List[CatalogEntryRead], summary=f"List {label.lower()} entries")
    def list_entries(
        session: SessionDep,
        current_user: User = Depends(get_current_user),
    ) -> List[CatalogModel]:
        return list(session.exec(select(model).order_by(model.name)).all())

    @router.post(
        "/",
        response_model=CatalogEntryRead,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label.lower()}",
    )
    def create_entry(
        payload: CatalogEntryCreate,
        session: SessionDep,
        principal: Principal = Depends(get_principal),
    ) -> CatalogModel:
        require_elevated(principal)
        entry = model(name=payload.name.strip())
        _save(session, entry, label)
        logger.info("User %s created %s %s", principal.id, label, entry.id)
        return entry

    @router.put("/{entry_id}", response_model=CatalogEntryRead, summary=f"Rename {label.lower()}")
    def update_entry(
        entry_id: UUID,
        payload: CatalogEntryUpdate,
        session: SessionDep,
        principal: Principal = Depends(get_principal),
    ) -> CatalogModel:
        require_elevated(principal)
        entry = get_or_404(session, entry_id)
        entry.name = payload.name.strip()
        _save(session, entry, label)
        return entry

    @router.delete(
        "/{entry_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {label.lower()}",
    )
    def delete_entry(
        entry_id: UUID,
        session: SessionDep,
        principal: Principal = Depends(get_principal),
    ) -> None:
        require_elevated(principal)
        entry = get_or_404(session, entry_id)
        session.delete(entry)
        session.commit()
        logger.info("User %s deleted %s %s", principal.id, label, entry_id)

    return router


activity_types_router = make_catalog_router(ActivityType, "Activity type")
vendors_router = make_catalog_router(Vendor, "Vendor")
