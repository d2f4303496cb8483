from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import entitlements
from ..database import get_db
from ..schemas import ModuleAction, ModuleSettingsUpdate
from ..serializers import serialize_module

router = APIRouter(prefix="/api/admin/modules", tags=["modules"])

_ACTIONS = {
    "purchase": (entitlements.purchase, "Module purchased successfully"),
    "enable": (entitlements.enable, "Module enabled successfully"),
    "disable": (entitlements.disable, "Module disabled successfully"),
}


@router.get("")
def list_modules(db: Session = Depends(get_db)):
    return {"modules": entitlements.list_modules(db)}


@router.post("")
def apply_module_action(req: ModuleAction, db: Session = Depends(get_db)):
    handler, message = _ACTIONS[req.action]
    module = handler(db, req.module_id)
    return {"success": True, "message": message, "module": serialize_module(module)}


@router.patch("")
def update_module_settings(req: ModuleSettingsUpdate, db: Session = Depends(get_db)):
    module = entitlements.update_settings(db, req.module_id, req.settings)
    return {"success": True, "module": serialize_module(module)}


# Used by the admin UI to decide which pages to show.
@router.get("/status")
def module_status(modules: Optional[str] = None, db: Session = Depends(get_db)):
    if modules:
        ids = [m.strip() for m in modules.split(",") if m.strip()]
        return {"status": entitlements.module_statuses(db, ids)}
    return {"enabled": entitlements.enabled_module_ids(db)}
