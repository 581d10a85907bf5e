# models/cultura.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, BigInteger, Integer, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Cultura(Base):
    __tablename__ = "cultura"

    cultura_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    variedade: Mapped[str | None] = mapped_column(String(120))
    ciclo_estimado_dias: Mapped[int | None] = mapped_column(Integer)
    produtividade: Mapped[Decimal | None] = mapped_column(Numeric(14, 3))  # Referência (massa/ha)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
