from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from pageguard.config import settings


def build_engine(database_url: str):
    """Create an engine; SQLite needs cross-thread access for the API workers"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20
    )


# 1. Create Engine
engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Dependency for FastAPI routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    """Initialize database tables"""
    # Import models here so they register with 'Base'
    import pageguard.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
