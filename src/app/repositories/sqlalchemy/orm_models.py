"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.repositories.sqlalchemy.database import Base


class SectorORM(Base):
    """SQLAlchemy model for Sector."""

    __tablename__ = "sectors"

    sector_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)


class StockORM(Base):
    """SQLAlchemy model for Stock."""

    __tablename__ = "stocks"

    stock_id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), unique=True, nullable=False)
    company_name = Column(String(100), nullable=True)
    sector_id = Column(Integer, ForeignKey("sectors.sector_id"), nullable=False)
    price_per_share = Column(Numeric(precision=18, scale=4), nullable=True)


class ProfileORM(Base):
    """SQLAlchemy model for Profile."""

    __tablename__ = "profiles"

    profile_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)

    weights = relationship(
        "ProfileSectorWeightORM",
        back_populates="profile",
        cascade="all, delete-orphan",
    )


class ProfileSectorWeightORM(Base):
    """Target percentage of one sector in a profile, keyed by sector name."""

    __tablename__ = "profile_sector_weights"

    profile_id = Column(Integer, ForeignKey("profiles.profile_id"), primary_key=True)
    sector_name = Column(String(100), primary_key=True)
    percentage = Column(Integer, nullable=False)

    profile = relationship("ProfileORM", back_populates="weights")


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("client_id", "name"),)

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    client_id = Column(Integer, nullable=True)
    advisor_id = Column(Integer, nullable=True)
    profile_id = Column(Integer, ForeignKey("profiles.profile_id"), nullable=False)
    reinvest = Column(Boolean, default=False, nullable=False)
    cash_balance = Column(Numeric(precision=18, scale=4), default=Decimal("0"), nullable=False)


class PositionORM(Base):
    """SQLAlchemy model for Position (holding of a stock in an account)."""

    __tablename__ = "positions"

    account_id = Column(Integer, ForeignKey("accounts.account_id"), primary_key=True)
    stock_id = Column(Integer, ForeignKey("stocks.stock_id"), primary_key=True)
    quantity = Column(Numeric(precision=18, scale=8), default=Decimal("0"), nullable=False)
    acb = Column(Numeric(precision=18, scale=8), default=Decimal("0"), nullable=False)
    updated_at_est = Column(DateTime, nullable=True)


class FirmHoldingORM(Base):
    """SQLAlchemy model for the firm's fractional-share bucket."""

    __tablename__ = "firm_holdings"

    stock_id = Column(Integer, ForeignKey("stocks.stock_id"), primary_key=True)
    fractional_balance = Column(Numeric(precision=18, scale=8), default=Decimal("0"), nullable=False)
    updated_at_est = Column(DateTime, nullable=True)
