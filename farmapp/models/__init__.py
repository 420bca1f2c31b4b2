"""SQLAlchemy ORM models."""

from farmapp.models.base import Base
from farmapp.models.batch import Batch
from farmapp.models.client import Client
from farmapp.models.expense import Expense
from farmapp.models.farm import Farm
from farmapp.models.payment import Payment
from farmapp.models.sale import Sale
from farmapp.models.user import User

__all__ = ["Base", "Batch", "Client", "Expense", "Farm", "Payment", "Sale", "User"]
