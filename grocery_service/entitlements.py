"""Module entitlement state machine.

Per module id: unpurchased -> purchased & disabled <-> purchased & enabled.
Core modules are implicitly enabled whatever their row says, and any attempt
to disable one is rejected.

Updates are plain read-modify-write on a single row; two concurrent toggles
of the same module resolve last-write-wins.
"""
import logging
from typing import Dict, Iterable, List

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import get_db
from .errors import (
    CoreModuleLockedError,
    ModuleNotEnabledError,
    ModuleNotPurchasedError,
    UnknownModuleError,
)
from .models import Module, utcnow
from .registry import CORE_MODULE_IDS, all_modules, get_module_definition, is_core_module

logger = logging.getLogger(__name__)


def _definition(module_id):
    definition = get_module_definition(module_id)
    if definition is None:
        raise UnknownModuleError(module_id)
    return definition


def _row(db: Session, module_id):
    return db.query(Module).filter(Module.module_id == module_id).first()


def _purchased_row(db: Session, module_id) -> Module:
    module = _row(db, module_id)
    if module is None:
        raise ModuleNotPurchasedError(module_id)
    return module


def purchase(db: Session, module_id) -> Module:
    """Create or refresh the entitlement row. Never enables the module."""
    definition = _definition(module_id)
    module = _row(db, module_id)
    if module is None:
        module = Module(module_id=module_id, enabled=False, settings={})
        db.add(module)
    module.name = definition.name
    module.description = definition.description
    module.version = definition.version
    module.purchased = True
    module.purchased_at = utcnow()
    db.commit()
    db.refresh(module)
    logger.info("Module %s purchased", module_id)
    return module


def enable(db: Session, module_id) -> Module:
    _definition(module_id)
    module = _purchased_row(db, module_id)
    module.enabled = True
    db.commit()
    db.refresh(module)
    logger.info("Module %s enabled", module_id)
    return module


def disable(db: Session, module_id) -> Module:
    _definition(module_id)
    if is_core_module(module_id):
        raise CoreModuleLockedError(module_id)
    module = _purchased_row(db, module_id)
    module.enabled = False
    db.commit()
    db.refresh(module)
    logger.info("Module %s disabled", module_id)
    return module


def update_settings(db: Session, module_id, partial_settings) -> Module:
    """Shallow-merge ``partial_settings`` into the stored settings bag."""
    _definition(module_id)
    module = _purchased_row(db, module_id)
    merged = dict(module.settings or {})
    merged.update(partial_settings or {})
    # Assign a new dict so the JSON column is flagged dirty.
    module.settings = merged
    db.commit()
    db.refresh(module)
    return module


def is_module_enabled(db: Session, module_id) -> bool:
    """Entitlement check used for gating. Fails closed on any lookup error."""
    if module_id in CORE_MODULE_IDS:
        return True
    try:
        module = db.query(Module).filter(
            Module.module_id == module_id, Module.enabled.is_(True)
        ).first()
    except SQLAlchemyError:
        logger.exception("Error checking module %s", module_id)
        db.rollback()
        return False
    return module is not None


def enabled_module_ids(db: Session) -> List[str]:
    """Core modules plus every row flagged enabled."""
    enabled = sorted(CORE_MODULE_IDS)
    try:
        rows = db.query(Module.module_id).filter(Module.enabled.is_(True)).all()
    except SQLAlchemyError:
        logger.exception("Error getting enabled modules")
        db.rollback()
        return enabled
    enabled.extend(module_id for (module_id,) in rows if module_id not in CORE_MODULE_IDS)
    return enabled


def module_statuses(db: Session, module_ids: Iterable[str]) -> Dict[str, bool]:
    enabled = set(enabled_module_ids(db))
    return {module_id: module_id in enabled for module_id in module_ids}


def list_modules(db: Session):
    """Registry definitions joined with their entitlement rows."""
    rows = {row.module_id: row for row in db.query(Module).all()}
    modules = []
    for definition in all_modules():
        row = rows.get(definition.id)
        data = definition.to_dict()
        data.update({
            "enabled": definition.id in CORE_MODULE_IDS or bool(row and row.enabled),
            "purchased": bool(row and row.purchased),
            "purchasedAt": row.purchased_at.isoformat() if row and row.purchased_at else None,
            "settings": dict(row.settings or {}) if row else {},
        })
        modules.append(data)
    return modules


def require_module(module_id):
    """FastAPI dependency factory: 403 unless ``module_id`` is enabled."""
    definition = get_module_definition(module_id)
    name = definition.name if definition else module_id

    def dependency(db: Session = Depends(get_db)):
        if not is_module_enabled(db, module_id):
            raise ModuleNotEnabledError(module_id, name)

    return dependency
