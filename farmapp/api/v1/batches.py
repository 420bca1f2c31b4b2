"""Bird batches (flocks); writes need manage_inventory."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, require_permission
from farmapp.api.v1.farms import require_active_farm
from farmapp.core.database import get_db
from farmapp.models import Batch
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.batches import BatchCreate, BatchRead, BatchUpdate
from farmapp.schemas.users import MessageResponse

router = APIRouter()
can_manage_inventory = require_permission("manage_inventory")


def _get_batch_or_404(db: Session, batch_id: int) -> Batch:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    return batch


@router.get("", response_model=list[BatchRead])
def list_batches(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    farm_id: int | None = None,
) -> list[BatchRead]:
    """List batches, most recently hatched first."""
    query = db.query(Batch)
    if farm_id is not None:
        query = query.filter(Batch.farm_id == farm_id)
    batches = query.order_by(Batch.hatch_date.desc(), Batch.id.desc()).all()
    return [BatchRead.model_validate(b) for b in batches]


@router.get("/{batch_id}", response_model=BatchRead)
def get_batch(
    batch_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> BatchRead:
    return BatchRead.model_validate(_get_batch_or_404(db, batch_id))


@router.post("", response_model=BatchRead, status_code=status.HTTP_201_CREATED)
def create_batch(
    body: BatchCreate,
    user: Annotated[CurrentUser, Depends(can_manage_inventory)],
    db: Annotated[Session, Depends(get_db)],
) -> BatchRead:
    require_active_farm(db, body.farm_id)
    batch = Batch(**body.model_dump(), created_by=user.id, updated_by=user.id)
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return BatchRead.model_validate(batch)


@router.put("/{batch_id}", response_model=BatchRead)
def update_batch(
    batch_id: int,
    body: BatchUpdate,
    user: Annotated[CurrentUser, Depends(can_manage_inventory)],
    db: Annotated[Session, Depends(get_db)],
) -> BatchRead:
    batch = _get_batch_or_404(db, batch_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(batch, key, value)
    batch.updated_by = user.id
    db.commit()
    db.refresh(batch)
    return BatchRead.model_validate(batch)


@router.delete("/{batch_id}", response_model=MessageResponse)
def delete_batch(
    batch_id: int,
    _user: Annotated[CurrentUser, Depends(can_manage_inventory)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    batch = _get_batch_or_404(db, batch_id)
    db.delete(batch)
    db.commit()
    return MessageResponse(message="Batch deleted successfully")
