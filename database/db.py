from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from config.secrets import DATABASE_URL
from config.settings import DATABASE_ECHO

# SQLite connections are shared with Flask's request threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create an engine that connects to the database
engine = create_engine(DATABASE_URL, echo=DATABASE_ECHO, connect_args=connect_args)

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session=None):
    """Yield ``session`` untouched, or a fresh session that is closed afterwards."""
    if session is not None:
        yield session
        return

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
