"""
SQLAlchemy models for Solde persistence.
"""

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""


class BalanceModel(Base):
    """Cached balance database model - one row per wallet."""

    __tablename__ = "balances"

    wallet_address: Mapped[str] = mapped_column(String(44), primary_key=True)
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # ISO-8601 text for portability
    last_updated: Mapped[str] = mapped_column(Text, nullable=False)
