import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Category, Product
from ..schemas import CategoryIn
from ..serializers import serialize_category

router = APIRouter(prefix="/api/categories", tags=["categories"])


def slugify(name):
    slug = re.sub(r"[^\w\s-]", "", name.lower().strip())
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def _clean_name(req: CategoryIn):
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    return name


def _ensure_unique(db: Session, name, slug, exclude_id=None):
    query = db.query(Category).filter(or_(Category.name == name, Category.slug == slug))
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="Category with this name already exists")


def get_category_or_404(db: Session, category_id) -> Category:
    category = db.get(Category, int(category_id)) if str(category_id).isdigit() else None
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    return [serialize_category(c) for c in db.query(Category).order_by(Category.name).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(req: CategoryIn, db: Session = Depends(get_db)):
    name = _clean_name(req)
    slug = slugify(name)
    _ensure_unique(db, name, slug)
    category = Category(name=name, slug=slug)
    db.add(category)
    db.commit()
    db.refresh(category)
    return serialize_category(category)


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    return serialize_category(get_category_or_404(db, category_id))


@router.patch("/{category_id}")
def update_category(category_id: str, req: CategoryIn, db: Session = Depends(get_db)):
    category = get_category_or_404(db, category_id)
    name = _clean_name(req)
    slug = slugify(name)
    _ensure_unique(db, name, slug, exclude_id=category.id)
    category.name = name
    category.slug = slug
    db.commit()
    db.refresh(category)
    return serialize_category(category)


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    category = get_category_or_404(db, category_id)
    # Products reference categories by name.
    in_use = db.query(Product).filter(Product.category == category.name).count()
    if in_use:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Cannot delete category. {in_use} product(s) are using this category. "
                "Please update or remove those products first."
            ),
        )
    db.delete(category)
    db.commit()
    return {"success": True, "message": "Category deleted successfully"}
