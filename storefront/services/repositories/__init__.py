"""
Repository Pattern for Database Operations

- CartRepository: guest and user cart rows
- ProfileRepository: profile fields and saved vehicle
- AddressRepository: shipping/billing addresses
- RoleRepository: user_roles membership
- CatalogRepository: products, categories, fitments
"""
from .address_repo import AddressRepository
from .cart_repo import CartRepository
from .catalog_repo import CatalogRepository
from .profile_repo import ProfileRepository
from .role_repo import RoleRepository

__all__ = [
    "AddressRepository",
    "CartRepository",
    "CatalogRepository",
    "ProfileRepository",
    "RoleRepository",
]
