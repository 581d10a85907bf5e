# models/planejamento.py
from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, String, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Planejamento(Base):
    __tablename__ = "planejamento"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN setor_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN lote_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN canteiro_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_planejamento_uma_area",
        ),
    )

    planejamento_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    cultura_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("cultura.cultura_id"), nullable=False, index=True)

    area_tipo: Mapped[str] = mapped_column(String(10), nullable=False)  # setor / lote / canteiro
    setor_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("setor.setor_id"))
    lote_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("lote.lote_id"))
    canteiro_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("canteiro.canteiro_id"))

    data_inicio: Mapped[date] = mapped_column(Date, nullable=False)
    data_fim_prevista: Mapped[date] = mapped_column(Date, nullable=False)

    area_plantada: Mapped[Decimal | None] = mapped_column(Numeric(14, 4))            # ha
    produtividade_esperada: Mapped[Decimal | None] = mapped_column(Numeric(14, 3))   # massa/ha
    status: Mapped[str] = mapped_column(String(15), default="planejado", nullable=False)
    observacoes: Mapped[str | None] = mapped_column(String(255))

    created_by: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("usuario.usuario_id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False)

    # Relationships
    colheitas: Mapped[list["Colheita"]] = relationship(
        "Colheita", back_populates="planejamento", order_by="Colheita.colheita_id"
    )
