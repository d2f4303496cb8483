import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Menu
from ..schemas import MenuCreate, MenuItemIn, MenuUpdate
from ..serializers import serialize_menu

router = APIRouter(tags=["menus"])


def build_menu_items(items: List[MenuItemIn]):
    """Items as stored: camelCase dicts with an id and a position."""
    built = []
    for index, item in enumerate(items):
        data = item.model_dump(by_alias=True)
        data["id"] = data["id"] or uuid.uuid4().hex
        if data["order"] is None:
            data["order"] = index
        built.append(data)
    return built


def _ensure_location_free(db: Session, location, exclude_id=None):
    query = db.query(Menu).filter(Menu.location == location)
    if exclude_id is not None:
        query = query.filter(Menu.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="A menu with this location already exists")


def get_menu_or_404(db: Session, menu_id) -> Menu:
    menu = db.get(Menu, int(menu_id)) if str(menu_id).isdigit() else None
    if menu is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return menu


@router.get("/api/admin/menus")
def list_menus(db: Session = Depends(get_db)):
    return [serialize_menu(m) for m in db.query(Menu).order_by(Menu.location).all()]


@router.post("/api/admin/menus", status_code=status.HTTP_201_CREATED)
def create_menu(req: MenuCreate, db: Session = Depends(get_db)):
    _ensure_location_free(db, req.location)
    menu = Menu(
        name=req.name,
        location=req.location,
        items=build_menu_items(req.items),
        is_active=req.is_active,
    )
    db.add(menu)
    db.commit()
    db.refresh(menu)
    return serialize_menu(menu)


@router.get("/api/admin/menus/{menu_id}")
def get_menu(menu_id: str, db: Session = Depends(get_db)):
    return serialize_menu(get_menu_or_404(db, menu_id))


@router.patch("/api/admin/menus/{menu_id}")
def update_menu(menu_id: str, req: MenuUpdate, db: Session = Depends(get_db)):
    menu = get_menu_or_404(db, menu_id)
    if req.location is not None and req.location != menu.location:
        _ensure_location_free(db, req.location, exclude_id=menu.id)
        menu.location = req.location
    if req.name is not None:
        menu.name = req.name
    if req.items is not None:
        menu.items = build_menu_items(req.items)
    if req.is_active is not None:
        menu.is_active = req.is_active
    db.commit()
    db.refresh(menu)
    return serialize_menu(menu)


@router.delete("/api/admin/menus/{menu_id}")
def delete_menu(menu_id: str, db: Session = Depends(get_db)):
    menu = get_menu_or_404(db, menu_id)
    db.delete(menu)
    db.commit()
    return {"success": True, "message": "Menu deleted successfully"}


# Storefront navigation.
@router.get("/api/menus")
def public_menus(location: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(Menu).filter(Menu.is_active.is_(True))
    if location:
        query = query.filter(Menu.location == location)
    return [serialize_menu(m) for m in query.order_by(Menu.location).all()]
