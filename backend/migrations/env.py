import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine, pool


# --- add backend/ to sys.path (so "marketwatch.*" imports work)
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from alembic import context

config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from marketwatch.db_base import Base
target_metadata = Base.metadata

# Ensure all models are registered on Base.metadata for autogenerate
from marketwatch.repositories.sql_identity_models import (  # noqa: F401
    AccessTokenRow,
    UserRoleRow,
    UserRow,
)
from marketwatch.repositories.sql_portfolio_repository import PortfolioRow, TransactionRow  # noqa: F401
from marketwatch.repositories.sql_market_data_repository import HistoricalPriceRow, QuoteRow  # noqa: F401
from marketwatch.repositories.sql_alert_repository import AlertThresholdRow, NotificationRow  # noqa: F401
from marketwatch.repositories.sql_audit_repository import AuditLogRow  # noqa: F401
from marketwatch.repositories.sql_message_repository import MessageRow  # noqa: F401
from marketwatch.repositories.sql_advisor_repository import AdvisorClientRow  # noqa: F401
from marketwatch.repositories.sql_stock_symbol_repository import StockSymbolRow  # noqa: F401


def _database_url() -> str:
    from marketwatch.settings import load_settings

    return load_settings().database_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL for the configured URL without opening a connection.
    """
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
