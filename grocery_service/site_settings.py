import logging

from sqlalchemy.orm import Session

from .models import Settings

logger = logging.getLogger(__name__)


def get_or_create_settings(db: Session) -> Settings:
    """Return the singleton settings row, creating it with defaults if absent."""
    settings = db.query(Settings).filter(Settings.singleton.is_(True)).first()
    if settings is None:
        logger.info("No settings found, creating default settings")
        settings = Settings(singleton=True)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings


def find_settings(db: Session):
    """The settings row or None; never creates one."""
    return db.query(Settings).filter(Settings.singleton.is_(True)).first()
