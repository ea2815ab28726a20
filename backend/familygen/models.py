from __future__ import annotations
from typing import Optional, Literal
from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    BigInteger, Integer, String, Text, Date, DateTime, CheckConstraint,
    ForeignKey, Index
)
from sqlalchemy.sql import func

from familygen.db import Base

# SQLite only auto-increments "INTEGER PRIMARY KEY"
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

Role = Literal["paciente", "profissional"]
Sex = Literal["M", "F"]


class Family(Base):
    __tablename__ = "families"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    # families <-> individuals reference each other
    creator_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("individuals.id", ondelete="SET NULL", use_alter=True, name="fk_families_creator_id"),
        nullable=True,
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Individual(Base):
    """
    Patient account ('paciente').
    Rows added by a family member may have no email; their password_hash is the
    hash of an empty password, which login never accepts.
    """
    __tablename__ = "individuals"
    __table_args__ = (
        CheckConstraint("sex in ('M','F') or sex is null", name="ck_individuals_sex"),
        Index("idx_individuals_family", "family_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    sex: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    prior_diagnosis: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    genetic_panel: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    family_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK, ForeignKey("families.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Professional(Base):
    """Health professional account ('profissional'). Identity fields only."""
    __tablename__ = "professionals"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
