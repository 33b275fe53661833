# backend/models/product.py
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, func
from config import settings
from database import Base

# Model Product
# A catalog entry owned by the user who last created or updated it.
# image holds a filename inside UPLOAD_DIR or the NO_IMAGE sentinel.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    image = Column(String(255), nullable=False, default=settings.NO_IMAGE)

    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
