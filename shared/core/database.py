from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import ESTATE_DATABASE_URL

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def build_engine(url: str):
    if url.startswith("sqlite"):
        # in-memory databases must share one connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool
            )
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )


estate_engine = build_engine(ESTATE_DATABASE_URL)
EstateSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=estate_engine)


# Dependency
def get_estate_db():
    db = EstateSessionLocal()
    try:
        yield db
    finally:
        db.close()
