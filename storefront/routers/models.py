"""
API Pydantic Models

Request bodies shared by the storefront routers.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    product_id: str
    quantity: int  # 0 or less removes the line


# ==================== VEHICLE MODELS ====================

class SaveVehicleRequest(BaseModel):
    year: int
    make: str
    model: str
    engine: Optional[str] = None


# ==================== AUTH MODELS ====================

class SignUpRequest(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SignInRequest(BaseModel):
    email: str
    password: str
    is_admin_login: bool = False


# ==================== ACCOUNT MODELS ====================

class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class AddressRequest(BaseModel):
    type: Literal["shipping", "billing"]
    first_name: str
    last_name: str
    company: Optional[str] = None
    address_line_1: str
    address_line_2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: Optional[str] = None
    is_default: bool = False


# ==================== FUNCTION MODELS ====================

class UpdateUserRoleRequest(BaseModel):
    # Field names match the JSON the admin UI already sends
    user_id: Optional[str] = Field(default=None, alias="userId")
    role: Optional[str] = None
