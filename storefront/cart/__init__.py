"""Cart package: models, storage contract, and reconciliation manager."""
from .models import Cart, CartLine, CartOwner, GuestOwner, UserOwner
from .service import CartManager, SyncStatus
from .storage import CartStore

__all__ = [
    "Cart",
    "CartLine",
    "CartOwner",
    "GuestOwner",
    "UserOwner",
    "CartManager",
    "CartStore",
    "SyncStatus",
]
