# models/propriedade.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, BigInteger, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Propriedade(Base):
    __tablename__ = "propriedade"

    propriedade_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(150), nullable=False)
    localizacao: Mapped[str] = mapped_column(String(200), nullable=False)
    tamanho_ha: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    nif: Mapped[str | None] = mapped_column(String(30))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False)

    # Relationships
    setores: Mapped[list["Setor"]] = relationship(
        "Setor", back_populates="propriedade", cascade="all, delete-orphan"
    )


class Setor(Base):
    __tablename__ = "setor"

    setor_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    area_ha: Mapped[Decimal | None] = mapped_column(Numeric(14, 4))
    descricao: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    propriedade: Mapped["Propriedade"] = relationship("Propriedade", back_populates="setores")
    lotes: Mapped[list["Lote"]] = relationship("Lote", back_populates="setor", cascade="all, delete-orphan")


class Lote(Base):
    __tablename__ = "lote"

    lote_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    setor_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("setor.setor_id"), nullable=False, index=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    area_ha: Mapped[Decimal | None] = mapped_column(Numeric(14, 4))
    descricao: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    setor: Mapped["Setor"] = relationship("Setor", back_populates="lotes")
    canteiros: Mapped[list["Canteiro"]] = relationship("Canteiro", back_populates="lote", cascade="all, delete-orphan")


class Canteiro(Base):
    __tablename__ = "canteiro"

    canteiro_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    lote_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("lote.lote_id"), nullable=False, index=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    area_ha: Mapped[Decimal | None] = mapped_column(Numeric(14, 4))
    descricao: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    lote: Mapped["Lote"] = relationship("Lote", back_populates="canteiros")
