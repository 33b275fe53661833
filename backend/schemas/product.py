# backend/schemas/product.py
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Annotated, Optional, List


# Largest id or page number accepted from clients; keeps values inside SQLite INTEGER
MAX_INT = 2**31 - 1

CategoryId = Annotated[int, Field(ge=1, le=MAX_INT)]


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Form fields shared by create and update; the image arrives as a separate multipart file
class ProductForm(BaseModel):
    name: str = Field(min_length=3)
    slug: str = Field(min_length=1)
    price: float = Field(allow_inf_nan=False)
    category_id: CategoryId
    description: Optional[str] = None


# Full product representation as stored
class ProductOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    price: float
    image: str
    category_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Listing row with joined category name and owner fullname
class ProductListItem(ProductOut):
    category_name: str
    user_fullname: str


class ProductListResponse(BaseModel):
    status: bool = True
    total: int
    products: List[ProductListItem]


class ProductResponse(BaseModel):
    status: bool = True
    message: Optional[str] = None
    product: ProductOut
