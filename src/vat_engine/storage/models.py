"""SQLAlchemy ORM models for the VAT reference tables."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[str] = mapped_column(String(2), primary_key=True)  # ISO 3166-1 alpha-2
    alpha3: Mapped[str | None] = mapped_column(String(3), unique=True, nullable=True)
    name_en: Mapped[str] = mapped_column(String(100), index=True)
    name_local: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_eu_member: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    is_eea_member: Mapped[bool] = mapped_column(Boolean, default=False)
    standard_vat_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    currency_code: Mapped[str | None] = mapped_column(String(3), nullable=True)
    region: Mapped[str | None] = mapped_column(String(50), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class VatCategory(Base):
    __tablename__ = "vat_categories"

    code: Mapped[str] = mapped_column(String(50), primary_key=True)  # STANDARD, BOOKS, FOOD_ESSENTIAL, ...
    name_en: Mapped[str] = mapped_column(String(200))
    name_bg: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    annex_iii_category: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CountryVatRate(Base):
    """Append-only: a rate change is a new row with a later effective_from."""
    __tablename__ = "country_vat_rates"
    __table_args__ = (
        UniqueConstraint("country_id", "category_code", "effective_from", name="uq_country_vat_rates_start"),
    )

    rate_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    country_id: Mapped[str] = mapped_column(ForeignKey("countries.id", ondelete="CASCADE"), index=True)
    category_code: Mapped[str] = mapped_column(ForeignKey("vat_categories.code", ondelete="CASCADE"), index=True)
    vat_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    rate_type: Mapped[str] = mapped_column(String(20))  # STANDARD, REDUCED, SUPER_REDUCED, ZERO, PARKING
    effective_from: Mapped[date] = mapped_column(Date)
    effective_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
