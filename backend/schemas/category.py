from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Payload for create and update
class CategoryIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    status: Optional[bool] = None


class CategoryOut(ORMBase):
    id: int
    name: str
    status: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryListResponse(BaseModel):
    status: bool = True
    categories: List[CategoryOut]


class CategoryResponse(BaseModel):
    status: bool = True
    message: Optional[str] = None
    category: CategoryOut
