"""Pydantic request/response schemas."""

from farmapp.schemas.auth import CurrentUser, LoginRequest, RoleName, TokenResponse
from farmapp.schemas.batches import BatchCreate, BatchRead, BatchUpdate
from farmapp.schemas.clients import ClientCreate, ClientRead, ClientUpdate
from farmapp.schemas.dashboard import DailyProfit, DashboardStats, FinancialSummary
from farmapp.schemas.expenses import ExpenseCreate, ExpenseItem, ExpenseRead, ExpenseUpdate
from farmapp.schemas.farms import FarmCreate, FarmRead, FarmUpdate
from farmapp.schemas.health import HealthResponse
from farmapp.schemas.payments import PaymentCreate, PaymentRead, PaymentUpdate
from farmapp.schemas.sales import SaleCreate, SaleRead, SaleUpdate
from farmapp.schemas.upi import UpiExtraction, UpiTextRequest
from farmapp.schemas.users import MessageResponse, PasswordChange, UserCreate, UserRead, UserUpdate

__all__ = [
    "BatchCreate",
    "BatchRead",
    "BatchUpdate",
    "ClientCreate",
    "ClientRead",
    "ClientUpdate",
    "CurrentUser",
    "DailyProfit",
    "DashboardStats",
    "ExpenseCreate",
    "ExpenseItem",
    "ExpenseRead",
    "ExpenseUpdate",
    "FarmCreate",
    "FarmRead",
    "FarmUpdate",
    "FinancialSummary",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordChange",
    "PaymentCreate",
    "PaymentRead",
    "PaymentUpdate",
    "RoleName",
    "SaleCreate",
    "SaleRead",
    "SaleUpdate",
    "TokenResponse",
    "UpiExtraction",
    "UpiTextRequest",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
