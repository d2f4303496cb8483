from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    # Request handlers run in a threadpool; SQLite connections are per-thread by default.
    engine_options = {"connect_args": {"check_same_thread": False}}
else:
    # Drop connections the server closed while idle instead of failing the request.
    engine_options = {"pool_pre_ping": True}

engine = create_engine(DATABASE_URL, **engine_options)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Every model in models.py registers its table here; main.py creates them at startup.
Base = declarative_base()


def get_db():
    """Per-request session, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
