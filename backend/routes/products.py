# backend/routes/products.py
import logging
from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, Request, UploadFile, status
from pydantic import TypeAdapter, ValidationError as SchemaError
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
import schemas.product as product_schemas
from schemas.product import MAX_INT, CategoryId
from schemas.user import MessageResponse
from utils.audit import write_log
from utils.catalog import category_exists, get_product, list_products
from utils.errors import NotFound, ValidationError
from utils.images import ImageStore, get_image_store, image_errors
from utils.tokenJWT import Identity, capability_required, get_current_identity

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger(__name__)
_category_id = TypeAdapter(CategoryId)


# ---- HELPERS ----
def _uploaded(image: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers send an empty part when the file input is left blank
    if image is None or not image.filename:
        return None
    return image


def _validate_form(db: Session, store: ImageStore, raw: dict, image: Optional[UploadFile]) -> product_schemas.ProductForm:
    """Run every field rule and report all failures at once; nothing is written before this passes."""
    errors: Dict[str, List[str]] = {}
    form = None
    try:
        form = product_schemas.ProductForm.model_validate(raw)
    except SchemaError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "form"
            errors.setdefault(field, []).append(err["msg"])

    if "category_id" not in errors:
        category_id = form.category_id if form else _category_id.validate_python(raw["category_id"])
        if not category_exists(db, category_id):
            errors["category_id"] = ["The selected category id is invalid."]

    errors.update(image_errors(store, image))

    if errors:
        raise ValidationError(errors=errors)
    return form


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("", response_model=product_schemas.ProductListResponse)
def index_products(
    page: int = Query(1, ge=1, le=MAX_INT),
    limit: int = Query(100, ge=1, le=MAX_INT),
    search_query: Optional[str] = Query(None, alias="searchQuery"),
    category_id: Optional[int] = Query(None, alias="selectedCategory", le=MAX_INT),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    total, rows = list_products(db, page=page, limit=limit, search=search_query, category_id=category_id)
    return {"total": total, "products": rows}


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("", response_model=product_schemas.ProductResponse, status_code=status.HTTP_201_CREATED)
def store_product(
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="create")),
    store: ImageStore = Depends(get_image_store),
    image: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    image = _uploaded(image)
    form = _validate_form(db, store, {
        "name": name, "slug": slug, "price": price,
        "category_id": category_id, "description": description,
    }, image)

    filename = store.save(image) if image else store.sentinel

    product = Product(**form.model_dump(), image=filename, user_id=identity.user.id)
    db.add(product)
    db.commit()
    db.refresh(product)

    write_log(db, request, user_id=identity.user.id, action="PRODUCT_CREATE", resource="products", meta={"id": product.id, "image": product.image})

    return {"message": "Product created successfully", "product": product}


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductResponse)
def show_product(
    product_id: Annotated[int, Path(le=MAX_INT)],
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")
    return {"product": product}


# =========================
# AKTUALIZACJA PRODUKTU
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductResponse)
def update_product(
    product_id: Annotated[int, Path(le=MAX_INT)],
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="update")),
    store: ImageStore = Depends(get_image_store),
    image: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    image = _uploaded(image)
    form = _validate_form(db, store, {
        "name": name, "slug": slug, "price": price,
        "category_id": category_id, "description": description,
    }, image)

    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")

    for key, value in form.model_dump().items():
        setattr(product, key, value)
    # The editor becomes the owner
    product.user_id = identity.user.id

    if image:
        previous = product.image
        product.image = store.replace(previous, image)
        logger.info("Product %s image %s replaced by %s", product.id, previous, product.image)

    db.commit()
    db.refresh(product)

    write_log(db, request, user_id=identity.user.id, action="PRODUCT_UPDATE", resource="products", meta={"id": product.id, "image": product.image})

    return {"message": "Product updated successfully", "product": product}


# =========================
# USUWANIE
# =========================
@router.delete("/{product_id}", response_model=MessageResponse)
def destroy_product(
    product_id: Annotated[int, Path(le=MAX_INT)],
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(capability_required(action="delete")),
    store: ImageStore = Depends(get_image_store),
):
    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")

    pid, image = product.id, product.image
    if not store.is_sentinel(image):
        store.delete(image)

    db.delete(product)
    db.commit()

    write_log(db, request, user_id=identity.user.id, action="PRODUCT_DELETE", resource="products", meta={"id": pid})

    return {"message": "Product deleted successfully"}
