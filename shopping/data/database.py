# shopping/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from fastapi import Request

from shopping.utils.settings import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_ECHO,
)
from shopping.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    """
    SQLite nie zna SELECT ... FOR UPDATE, wiec kazda transakcja startuje
    od BEGIN IMMEDIATE - blokada zapisu na cala baze do commit/rollback.
    Dzieki temu checkouty sa serializowane tak jak przy blokadach wierszy.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        #wylaczamy wlasne BEGIN sterownika pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """Wspolna pula polaczen dla calego procesu, ograniczona rozmiarem."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=DB_ECHO,
            connect_args={"check_same_thread": False, "timeout": DB_POOL_TIMEOUT},
            **kwargs,
        )
        _configure_sqlite(engine)
        return engine

    return create_engine(
        url,
        echo=DB_ECHO,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        **kwargs,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Idempotentne tworzenie tabel, wywolywane raz przed obsluga ruchu."""
    #import wszystkich modeli zeby SQLAlchemy je zarejestrowal w Base.metadata
    import shopping.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready", tables=sorted(Base.metadata.tables.keys()))


engine = make_engine()
SessionLocal = make_session_factory(engine)


def get_db(request: Request):
    """
    Jedna sesja (= jedno polaczenie z puli) na request.
    close() w finally wycofuje niezatwierdzona transakcje i zwalnia blokady
    rowniez gdy klient porzuci zapytanie.
    """
    session_factory = getattr(request.app.state, "session_factory", SessionLocal)
    db: Session = session_factory()
    try:
        yield db
    finally:
        db.close()
