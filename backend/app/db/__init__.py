import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings
from app.utils.logs import get_logger

log = get_logger("db", "DB")

DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # sessions are handed between the event loop and threadpool workers
    connect_args["check_same_thread"] = False

engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# model modules that must be imported so Base.metadata knows every table
MODEL_MODULES = [
    "app.models.customer",
    "app.models.invoice",
    "app.models.user",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Behavior:
      - If reset is True or the RESET_DB env var is set to 1/true/yes, drop & recreate tables.
      - Otherwise, leave existing tables in place.
    """
    import importlib

    env_reset = os.environ.get("RESET_DB", "false").lower() in ("1", "true", "yes")

    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset or env_reset:
        log.info("Resetting database tables")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized: %s", ", ".join(sorted(Base.metadata.tables)))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
