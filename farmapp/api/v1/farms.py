"""Farms: any active user may read; only owners create, change or remove them."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, owner_only
from farmapp.core.database import get_db
from farmapp.models import Batch, Client, Expense, Farm, Payment, Sale
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.farms import FarmCreate, FarmRead, FarmUpdate
from farmapp.schemas.users import MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter()

_FARM_RECORDS = (Client, Sale, Batch, Expense, Payment)


def require_active_farm(db: Session, farm_id: int) -> Farm:
    """400 unless farm_id names an existing, active farm; used before creating farm records."""
    farm = db.get(Farm, farm_id)
    if farm is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Farm not found")
    if not farm.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Farm is not active")
    return farm


def _get_farm_or_404(db: Session, farm_id: int) -> Farm:
    farm = db.get(Farm, farm_id)
    if farm is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Farm not found")
    return farm


@router.get("", response_model=list[FarmRead])
def list_farms(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    is_active: bool | None = None,
) -> list[FarmRead]:
    """List farms by name; is_active=true gives only farms accepting new records."""
    query = db.query(Farm)
    if is_active is not None:
        query = query.filter(Farm.is_active == is_active)
    return [FarmRead.model_validate(f) for f in query.order_by(Farm.name, Farm.id).all()]


@router.get("/{farm_id}", response_model=FarmRead)
def get_farm(
    farm_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> FarmRead:
    return FarmRead.model_validate(_get_farm_or_404(db, farm_id))


@router.post("", response_model=FarmRead, status_code=status.HTTP_201_CREATED)
def create_farm(
    body: FarmCreate,
    owner: Annotated[CurrentUser, Depends(owner_only)],
    db: Annotated[Session, Depends(get_db)],
) -> FarmRead:
    farm = Farm(**body.model_dump(), created_by=owner.id, updated_by=owner.id)
    db.add(farm)
    db.commit()
    db.refresh(farm)
    logger.info("Farm created", extra={"farm_id": farm.id, "created_by": owner.id})
    return FarmRead.model_validate(farm)


@router.put("/{farm_id}", response_model=FarmRead)
def update_farm(
    farm_id: int,
    body: FarmUpdate,
    owner: Annotated[CurrentUser, Depends(owner_only)],
    db: Annotated[Session, Depends(get_db)],
) -> FarmRead:
    """Partial update; email, size and capacity can be cleared with null."""
    farm = _get_farm_or_404(db, farm_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(farm, key, value)
    farm.updated_by = owner.id
    db.commit()
    db.refresh(farm)
    return FarmRead.model_validate(farm)


@router.delete("/{farm_id}", response_model=MessageResponse)
def delete_farm(
    farm_id: int,
    owner: Annotated[CurrentUser, Depends(owner_only)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a farm with no records; otherwise deactivate it instead (409)."""
    farm = _get_farm_or_404(db, farm_id)
    for model in _FARM_RECORDS:
        if db.query(model.id).filter(model.farm_id == farm_id).first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Farm has records and cannot be deleted; deactivate it instead",
            )
    db.delete(farm)
    db.commit()
    logger.info("Farm deleted", extra={"farm_id": farm_id, "deleted_by": owner.id})
    return MessageResponse(message="Farm deleted successfully")
