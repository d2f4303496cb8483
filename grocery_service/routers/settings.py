import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import SettingsUpdate
from ..serializers import serialize_settings
from ..site_settings import get_or_create_settings
from ..theme import DEFAULT_THEME_COLOR, create_theme_css_variables, sanitize_theme_color

logger = logging.getLogger(__name__)

router = APIRouter(tags=["settings"])

# Served by the public endpoint when the settings store cannot be read.
PUBLIC_DEFAULTS = {
    "siteName": "Grocery Store",
    "siteDescription": "Your trusted online grocery store",
    "currency": "BDT",
    "currencySymbol": "৳",
    "taxRate": 5,
    "deliveryFee": 50,
    "freeDeliveryThreshold": 500,
    "deliveryTime": "2-3 days",
    "bannerEnabled": False,
    "maintenanceMode": False,
    "themeColor": DEFAULT_THEME_COLOR,
}


@router.get("/api/admin/settings")
def get_admin_settings(db: Session = Depends(get_db)):
    return serialize_settings(get_or_create_settings(db))


@router.patch("/api/admin/settings")
def update_settings(req: SettingsUpdate, db: Session = Depends(get_db)):
    settings = get_or_create_settings(db)
    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    if "theme_color" in changes:
        changes["theme_color"] = sanitize_theme_color(changes["theme_color"])
    for field, value in changes.items():
        setattr(settings, field, value)
    db.commit()
    db.refresh(settings)
    logger.info("Settings updated: %s", ", ".join(sorted(changes)) or "no fields")
    return {
        "success": True,
        "message": "Settings updated successfully",
        "settings": serialize_settings(settings),
    }


@router.get("/api/settings")
def get_public_settings(db: Session = Depends(get_db)):
    try:
        settings = get_or_create_settings(db)
    except SQLAlchemyError:
        logger.exception("Error fetching public settings, serving defaults")
        db.rollback()
        return dict(PUBLIC_DEFAULTS)
    return serialize_settings(settings, public=True)


@router.get("/api/settings/theme")
def get_theme(db: Session = Depends(get_db)):
    try:
        color = get_or_create_settings(db).theme_color
    except SQLAlchemyError:
        logger.exception("Error fetching theme color, using default")
        db.rollback()
        color = DEFAULT_THEME_COLOR
    color = sanitize_theme_color(color)
    return {"themeColor": color, "variables": create_theme_css_variables(color)}
