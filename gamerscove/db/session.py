from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from gamerscove.core.config import settings


def make_engine(database_url: str, echo: bool = False):
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool workers.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
