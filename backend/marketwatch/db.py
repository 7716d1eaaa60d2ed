from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from marketwatch.settings import get_settings


def get_database_url() -> str:
    return get_settings().database_url


def make_engine(url: str) -> Engine:
    # sqlite needs check_same_thread for FastAPI sync access
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(url, future=True, connect_args=connect_args)


@lru_cache
def get_engine() -> Engine:
    return make_engine(get_database_url())


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


def new_session() -> Session:
    return get_session_factory()()


def create_schema(engine: Engine) -> None:
    # import here to avoid circular imports; registers every row on Base.metadata
    from marketwatch.db_base import Base
    from marketwatch.repositories import sql_identity_models  # noqa: F401
    from marketwatch.repositories import sql_portfolio_repository  # noqa: F401
    from marketwatch.repositories import sql_market_data_repository  # noqa: F401
    from marketwatch.repositories import sql_alert_repository  # noqa: F401
    from marketwatch.repositories import sql_audit_repository  # noqa: F401
    from marketwatch.repositories import sql_message_repository  # noqa: F401
    from marketwatch.repositories import sql_advisor_repository  # noqa: F401
    from marketwatch.repositories import sql_stock_symbol_repository  # noqa: F401

    Base.metadata.create_all(engine)


@lru_cache
def init_db() -> None:
    create_schema(get_engine())
