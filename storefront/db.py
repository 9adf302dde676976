from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from storefront.config import settings

# -----------------------
# DATABASE URL
# -----------------------
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL.strip()

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

# -----------------------
# SQLAlchemy Engine
# -----------------------
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    future=True,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

# Base for ALL models
Base = declarative_base()


# -----------------------
# Dependency
# -----------------------
def get_db() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
