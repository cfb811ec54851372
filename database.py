from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from models import Base
import config


def get_session(databaseUrl=None):
    """Создает и возвращает фабрику сессий SQLAlchemy и движок базы данных"""
    url = databaseUrl or config.DATABASE_URL
    connectArgs = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connectArgs)
    session_factory = sessionmaker(bind=engine)
    return session_factory, engine


def init_tables(engine):
    """Инициализирует таблицы базы данных"""
    Base.metadata.create_all(engine)
