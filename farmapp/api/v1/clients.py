"""Clients (egg buyers): any active user may read; writes need manage_clients."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, require_permission
from farmapp.api.v1.farms import require_active_farm
from farmapp.core.database import get_db
from farmapp.models import Client, Sale
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.clients import ClientCreate, ClientRead, ClientUpdate
from farmapp.schemas.users import MessageResponse

router = APIRouter()
can_manage_clients = require_permission("manage_clients")


def _get_client_or_404(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.get("", response_model=list[ClientRead])
def list_clients(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    farm_id: int | None = None,
) -> list[ClientRead]:
    """List clients, newest first, optionally for one farm."""
    query = db.query(Client)
    if farm_id is not None:
        query = query.filter(Client.farm_id == farm_id)
    clients = query.order_by(Client.created_at.desc(), Client.id.desc()).all()
    return [ClientRead.model_validate(c) for c in clients]


@router.get("/{client_id}", response_model=ClientRead)
def get_client(
    client_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ClientRead:
    return ClientRead.model_validate(_get_client_or_404(db, client_id))


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientCreate,
    user: Annotated[CurrentUser, Depends(can_manage_clients)],
    db: Annotated[Session, Depends(get_db)],
) -> ClientRead:
    require_active_farm(db, body.farm_id)
    client = Client(**body.model_dump(), created_by=user.id, updated_by=user.id)
    db.add(client)
    db.commit()
    db.refresh(client)
    return ClientRead.model_validate(client)


@router.put("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    body: ClientUpdate,
    user: Annotated[CurrentUser, Depends(can_manage_clients)],
    db: Annotated[Session, Depends(get_db)],
) -> ClientRead:
    """Update name, phone or rate. Existing sales keep the amounts they were priced at."""
    client = _get_client_or_404(db, client_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(client, key, value)
    client.updated_by = user.id
    db.commit()
    db.refresh(client)
    return ClientRead.model_validate(client)


@router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: int,
    _user: Annotated[CurrentUser, Depends(can_manage_clients)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a client that has no recorded sales."""
    client = _get_client_or_404(db, client_id)
    if db.query(Sale.id).filter(Sale.client_id == client_id).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Client has recorded sales and cannot be deleted",
        )
    db.delete(client)
    db.commit()
    return MessageResponse(message="Client deleted successfully")
