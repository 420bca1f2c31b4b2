"""Egg sales: totals are priced from the client's rate when the sale is recorded."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from farmapp.api.v1.auth import get_current_user, require_permission
from farmapp.api.v1.farms import require_active_farm
from farmapp.core.config import Settings, get_settings
from farmapp.core.database import get_db
from farmapp.models import Client, Sale
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.sales import SaleCreate, SaleRead, SaleUpdate
from farmapp.schemas.users import MessageResponse
from farmapp.services.sales import apply_pricing

router = APIRouter()
can_manage_sales = require_permission("manage_sales")


def _get_sale_or_404(db: Session, sale_id: int) -> Sale:
    sale = db.get(Sale, sale_id)
    if sale is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return sale


def _client_or_400(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Client not found")
    return client


@router.get("", response_model=list[SaleRead])
def list_sales(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    farm_id: int | None = None,
    client_id: int | None = None,
) -> list[SaleRead]:
    """List sales by date, newest first; filter by farm and/or client."""
    query = db.query(Sale).options(selectinload(Sale.payments))
    if farm_id is not None:
        query = query.filter(Sale.farm_id == farm_id)
    if client_id is not None:
        query = query.filter(Sale.client_id == client_id)
    sales = query.order_by(Sale.date.desc(), Sale.id.desc()).all()
    return [SaleRead.model_validate(s) for s in sales]


@router.get("/{sale_id}", response_model=SaleRead)
def get_sale(
    sale_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SaleRead:
    return SaleRead.model_validate(_get_sale_or_404(db, sale_id))


@router.post("", response_model=SaleRead, status_code=status.HTTP_201_CREATED)
def create_sale(
    body: SaleCreate,
    user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SaleRead:
    """Record a sale of trays; eggs and total come from EGGS_PER_TRAY and the client's rate."""
    require_active_farm(db, body.farm_id)
    client = _client_or_400(db, body.client_id)
    sale = Sale(
        trays=body.trays,
        date=body.date or datetime.now(UTC),
        farm_id=body.farm_id,
        created_by=user.id,
        updated_by=user.id,
    )
    apply_pricing(sale, client, settings.EGGS_PER_TRAY)
    db.add(sale)
    db.commit()
    db.refresh(sale)
    return SaleRead.model_validate(sale)


@router.put("/{sale_id}", response_model=SaleRead)
def update_sale(
    sale_id: int,
    body: SaleUpdate,
    user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SaleRead:
    """Change client, trays or date. A client or tray change re-prices the sale."""
    sale = _get_sale_or_404(db, sale_id)
    if body.client_id is not None or body.trays is not None:
        client = (
            _client_or_400(db, body.client_id) if body.client_id is not None else sale.client
        )
        if body.trays is not None:
            sale.trays = body.trays
        apply_pricing(sale, client, settings.EGGS_PER_TRAY)
    if body.date is not None:
        sale.date = body.date
    sale.updated_by = user.id
    db.commit()
    db.refresh(sale)
    return SaleRead.model_validate(sale)


@router.delete("/{sale_id}", response_model=MessageResponse)
def delete_sale(
    sale_id: int,
    _user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    sale = _get_sale_or_404(db, sale_id)
    db.delete(sale)
    db.commit()
    return MessageResponse(message="Sale deleted successfully")
