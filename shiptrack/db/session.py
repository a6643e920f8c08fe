from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine
from shiptrack.core.config import settings

class Base(DeclarativeBase): pass

def make_engine(dsn: str):
    if dsn.startswith('sqlite'):
        return create_engine(dsn, connect_args={'check_same_thread': False})
    return create_engine(dsn, pool_pre_ping=True)

engine = make_engine(settings.POSTGRES_DSN)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
