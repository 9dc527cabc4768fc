from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from physioai.core.config import settings
from physioai.models.base import Base
from physioai.models import storage  # noqa: F401  (registers tables on Base.metadata)

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
