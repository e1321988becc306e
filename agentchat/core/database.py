# agentchat/core/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from agentchat.models.base import Base
from agentchat.core.config import DATABASE_URL

# Import models so they register with Base.metadata
import agentchat.models.user  # noqa: F401
import agentchat.models.profile  # noqa: F401
import agentchat.models.agent  # noqa: F401
import agentchat.models.conversation  # noqa: F401
import agentchat.models.message  # noqa: F401
import agentchat.models.setting  # noqa: F401

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db() -> None:
    Base.metadata.create_all(bind=engine)

def get_db():
    """
    Yields a database session for FastAPI dependencies.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
