"""Sale pricing: eggs and total amount are derived, never taken from the client request."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from farmapp.models import Client, Sale


def price_sale(trays: int, rate_per_tray: float, eggs_per_tray: int) -> tuple[int, float]:
    """Return (eggs, total_amount) for a number of trays at a client's rate."""
    if trays < 0:
        raise ValueError("trays must be non-negative")
    return trays * eggs_per_tray, round(trays * rate_per_tray, 2)


def apply_pricing(sale: "Sale", client: "Client", eggs_per_tray: int) -> None:
    """Attach client to sale and refresh client_name, eggs and total_amount from its rate."""
    sale.client = client
    sale.client_name = client.name
    sale.eggs, sale.total_amount = price_sale(sale.trays, client.rate_per_tray, eggs_per_tray)
