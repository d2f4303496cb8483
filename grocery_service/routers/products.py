import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Product
from ..schemas import BulkStockRequest, ProductCreate, ProductUpdate
from ..serializers import serialize_product

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


def find_product(db: Session, product_id) -> Optional[Product]:
    if not str(product_id).isdigit():
        return None
    return db.get(Product, int(product_id))


def get_product_or_404(db: Session, product_id) -> Product:
    product = find_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


# --- Storefront ---
@router.get("/api/products")
def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if search:
        pattern = f"%{search}%"
        # A search ignores the category filter.
        query = query.filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
    elif category:
        query = query.filter(Product.category == category)
    return [serialize_product(p) for p in query.order_by(Product.created_at, Product.id).all()]


@router.get("/api/products/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    return serialize_product(get_product_or_404(db, product_id))


# --- Admin ---
@router.get("/api/admin/products")
def admin_list_products(db: Session = Depends(get_db)):
    products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
    return [serialize_product(p) for p in products]


@router.post("/api/admin/products", status_code=status.HTTP_201_CREATED)
def create_product(req: ProductCreate, db: Session = Depends(get_db)):
    product = Product(**req.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created: %s", product.id, product.name)
    return serialize_product(product)


# Each update stands alone; a missing id is reported, not rolled back.
@router.patch("/api/admin/products/bulk-stock")
def bulk_update_stock(req: BulkStockRequest, db: Session = Depends(get_db)):
    results = []
    for update in req.updates:
        product = find_product(db, update.id)
        if product is None:
            results.append({"id": update.id, "success": False})
            continue
        product.stock_quantity = update.stock_quantity
        product.in_stock = update.in_stock
        db.commit()
        results.append({"id": update.id, "success": True})

    success_count = sum(1 for r in results if r["success"])
    failed_count = len(results) - success_count
    message = f"Updated {success_count} products"
    if failed_count:
        message += f", {failed_count} failed"
    return {"message": message, "results": results}


@router.patch("/api/admin/products/{product_id}")
def update_product(product_id: str, req: ProductUpdate, db: Session = Depends(get_db)):
    product = get_product_or_404(db, product_id)
    for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return serialize_product(product)


@router.delete("/api/admin/products/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    product = get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted", product_id)
    return {"success": True, "message": "Product deleted successfully"}
