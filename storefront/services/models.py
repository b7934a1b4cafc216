"""Database Models - Pydantic read models for Supabase rows."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from storefront.services.money import to_decimal as _to_decimal


class AppRole(str, Enum):
    """Values of the ``app_role`` enum in ``user_roles``."""
    ADMIN = "admin"
    USER = "user"


class Profile(BaseModel):
    """Row of ``profiles``; ``id`` equals the auth user id."""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    saved_vehicle: Optional[dict] = None  # year/make/model/engine, may be partial
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("saved_vehicle", mode="before")
    @classmethod
    def saved_vehicle_as_dict(cls, v):
        return v if isinstance(v, dict) else None


class Address(BaseModel):
    """Row of ``addresses``."""
    id: str
    user_id: str
    type: str  # shipping | billing
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
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("is_default", mode="before")
    @classmethod
    def null_default_is_false(cls, v):
        return bool(v)


class Category(BaseModel):
    """Row of ``categories``."""
    id: str
    name: str
    slug: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        extra = "ignore"


class Product(BaseModel):
    """Row of ``products`` with optional embedded brand/category names."""
    id: str
    title: str
    slug: str
    sku: str
    description: Optional[str] = None
    brand_id: Optional[str] = None
    category_id: Optional[str] = None
    price: Decimal
    sale_price: Optional[Decimal] = None
    stock: int = 0
    images: list[str] = []
    rating: Decimal = Decimal("0")
    rating_count: int = 0
    is_featured: bool = False
    is_active: bool = True
    brand: Optional[dict] = None
    category: Optional[dict] = None

    class Config:
        extra = "ignore"

    @field_validator("price", "rating", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("sale_price", mode="before")
    @classmethod
    def convert_sale_price(cls, v):
        return _to_decimal(v) if v is not None else None

    @field_validator("images", mode="before")
    @classmethod
    def images_as_list(cls, v):
        # The column is JSON; older rows hold null or an object
        return v if isinstance(v, list) else []

    @property
    def effective_price(self) -> Decimal:
        """Price a cart line is created with."""
        return self.sale_price if self.sale_price is not None else self.price


class Fitment(BaseModel):
    """Row of ``fitments``: a product fits years ``year_from..year_to``."""
    id: str
    product_id: str
    year_from: int
    year_to: int
    make: str
    model: str
    engine: Optional[str] = None
    trim: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        extra = "ignore"
