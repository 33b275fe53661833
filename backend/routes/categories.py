# backend/routes/categories.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from schemas import category as schemas
from schemas.product import MAX_INT
from schemas.user import MessageResponse
from utils.audit import write_log
from utils.catalog import count_category_products, get_category
from utils.errors import Conflict, NotFound
from utils.tokenJWT import Identity, capability_required, get_current_identity

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=schemas.CategoryListResponse)
def list_categories(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return {"categories": db.query(Category).all()}


@router.post("", response_model=schemas.CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: schemas.CategoryIn,
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="create")),
):
    category = Category(name=payload.name, status=payload.status)
    db.add(category)
    db.commit()
    db.refresh(category)

    write_log(db, request, user_id=identity.user.id, action="CATEGORY_CREATE", resource="categories", meta={"id": category.id, "name": category.name})

    return {"message": "Category created successfully", "category": category}


@router.get("/{category_id}", response_model=schemas.CategoryResponse)
def show_category(
    category_id: Annotated[int, Path(le=MAX_INT)],
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    category = get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")
    return {"category": category}


# Capability is checked before the category is looked up
@router.put("/{category_id}", response_model=schemas.CategoryResponse)
def update_category(
    category_id: Annotated[int, Path(le=MAX_INT)],
    payload: schemas.CategoryIn,
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="update")),
):
    category = get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")

    category.name = payload.name
    category.status = payload.status
    db.commit()
    db.refresh(category)

    write_log(db, request, user_id=identity.user.id, action="CATEGORY_UPDATE", resource="categories", meta={"id": category.id})

    return {"message": "Category updated successfully", "category": category}


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: Annotated[int, Path(le=MAX_INT)],
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="delete")),
):
    # Products must not be left pointing at a missing category
    if count_category_products(db, category_id):
        raise Conflict("Category still has products")

    # Absent ids are not an error
    deleted = db.query(Category).filter(Category.id == category_id).delete(synchronize_session=False)
    db.commit()

    write_log(db, request, user_id=identity.user.id, action="CATEGORY_DELETE", resource="categories", meta={"id": category_id, "deleted": deleted})

    return {"message": "Category deleted successfully"}
