# backend/models/category.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from database import Base


# Product category. Products reference it through products.category_id.
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    status = Column(Boolean, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
