"""messages, advisor links and stock symbol catalogue

Revision ID: 0002_messaging_and_symbols
Revises: 0001_initial_schema
Create Date: 2026-10-18 16:00:00.000000
"""

from __future__ import annotations

from uuid import uuid4

from alembic import op
import sqlalchemy as sa

revision = "0002_messaging_and_symbols"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


POPULAR_STOCKS = [
    ("AAPL", "Apple Inc.", "NASDAQ", "Technology", "Consumer Electronics"),
    ("MSFT", "Microsoft Corporation", "NASDAQ", "Technology", "Software"),
    ("GOOGL", "Alphabet Inc.", "NASDAQ", "Technology", "Internet"),
    ("AMZN", "Amazon.com Inc.", "NASDAQ", "Consumer Cyclical", "Internet Retail"),
    ("TSLA", "Tesla Inc.", "NASDAQ", "Consumer Cyclical", "Auto Manufacturers"),
    ("META", "Meta Platforms Inc.", "NASDAQ", "Technology", "Internet"),
    ("NVDA", "NVIDIA Corporation", "NASDAQ", "Technology", "Semiconductors"),
    ("JPM", "JPMorgan Chase & Co.", "NYSE", "Financial Services", "Banks"),
    ("V", "Visa Inc.", "NYSE", "Financial Services", "Credit Services"),
    ("WMT", "Walmart Inc.", "NYSE", "Consumer Defensive", "Discount Stores"),
    ("DIS", "The Walt Disney Company", "NYSE", "Communication Services", "Entertainment"),
    ("NFLX", "Netflix Inc.", "NASDAQ", "Communication Services", "Entertainment"),
    ("BA", "The Boeing Company", "NYSE", "Industrials", "Aerospace & Defense"),
    ("KO", "The Coca-Cola Company", "NYSE", "Consumer Defensive", "Beverages"),
    ("PFE", "Pfizer Inc.", "NYSE", "Healthcare", "Drug Manufacturers"),
]


def upgrade() -> None:
    op.create_table(
        "messages",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("sender_id", sa.String(length=36), nullable=False),
        sa.Column("receiver_id", sa.String(length=36), nullable=False),
        sa.Column("portfolio_id", sa.String(length=36), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["portfolio_id"], ["portfolios.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"], unique=False)
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"], unique=False)
    op.create_index("ix_messages_created_at", "messages", ["created_at"], unique=False)

    op.create_table(
        "advisor_clients",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("advisor_id", sa.String(length=36), nullable=False),
        sa.Column("client_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["advisor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["client_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("advisor_id", "client_id", name="uq_advisor_clients_pair"),
    )
    op.create_index("ix_advisor_clients_advisor_id", "advisor_clients", ["advisor_id"], unique=False)
    op.create_index("ix_advisor_clients_client_id", "advisor_clients", ["client_id"], unique=False)

    stock_symbols = op.create_table(
        "stock_symbols",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("symbol", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("exchange", sa.String(length=64), nullable=True),
        sa.Column("sector", sa.String(length=128), nullable=True),
        sa.Column("industry", sa.String(length=128), nullable=True),
        sa.Column("market_cap", sa.BigInteger(), nullable=True),
        sa.Column("is_popular", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_stock_symbols_symbol", "stock_symbols", ["symbol"], unique=True)

    op.bulk_insert(
        stock_symbols,
        [
            {
                "id": str(uuid4()),
                "symbol": symbol,
                "name": name,
                "exchange": exchange,
                "sector": sector,
                "industry": industry,
                "is_popular": True,
            }
            for symbol, name, exchange, sector, industry in POPULAR_STOCKS
        ],
    )


def downgrade() -> None:
    op.drop_table("stock_symbols")
    op.drop_table("advisor_clients")
    op.drop_table("messages")
