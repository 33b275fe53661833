# backend/utils/catalog.py
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from models.category import Category
from models.product import Product
from models.users import User

PRODUCT_LIST_COLUMNS = (
    Product.id,
    Product.name,
    Product.slug,
    Product.description,
    Product.price,
    Product.image,
    Product.category_id,
    Product.user_id,
    Product.created_at,
    Product.updated_at,
    Category.name.label("category_name"),
    User.fullname.label("user_fullname"),
)


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def category_exists(db: Session, category_id) -> bool:
    return db.query(Category.id).filter(Category.id == category_id).first() is not None


def count_category_products(db: Session, category_id: int) -> int:
    return db.query(Product.id).filter(Product.category_id == category_id).count()


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


def list_products(
    db: Session,
    page: int = 1,
    limit: int = 100,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
) -> Tuple[int, list]:
    """
    Products joined with their category name and owner's fullname.

    Returns (total, rows) where total counts every row matching the filters
    and rows is the page starting at (page - 1) * limit, newest id first.
    """
    query = (
        db.query(*PRODUCT_LIST_COLUMNS)
        .join(Category, Product.category_id == Category.id)
        .join(User, Product.user_id == User.id)
    )

    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))
    if category_id:
        query = query.filter(Product.category_id == category_id)

    total = query.count()
    rows = (
        query.order_by(Product.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return total, [dict(row._mapping) for row in rows]
