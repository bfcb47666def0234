# telecom_cart/data/database.py
import threading
from weakref import WeakKeyDictionary

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from telecom_cart.utils.settings import DATABASE_URL
from telecom_cart.utils.retry import db_retry
from telecom_cart.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

_connection_locks: "WeakKeyDictionary[Engine, threading.RLock]" = WeakKeyDictionary()
_connection_locks_guard = threading.Lock()


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # baza w pamieci zyje tylko tak dlugo jak polaczenie, wiec jedno wspolne
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def connection_lock(bind) -> "threading.RLock | None":
    """
    Lock dla silnika z jednym wspolnym polaczeniem (StaticPool).
    Sesje wszystkich requestow dziela wtedy jedna transakcje sqlite,
    wiec naraz moze pracowac tylko jedna jednostka pracy.
    """
    if not isinstance(bind, Engine) or not isinstance(bind.pool, StaticPool):
        return None
    with _connection_locks_guard:
        lock = _connection_locks.get(bind)
        if lock is None:
            lock = _connection_locks[bind] = threading.RLock()
        return lock


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@db_retry()
def init_db(bind: Engine | None = None) -> None:
    # import modeli zeby zarejestrowaly sie w Base.metadata przed create_all
    from telecom_cart.data import models  # noqa: F401

    target = bind or engine
    logger.info(f"Tworzenie tabel: {list(Base.metadata.tables.keys())} ({target.url.render_as_string(hide_password=True)})")
    Base.metadata.create_all(bind=target)
