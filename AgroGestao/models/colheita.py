# models/colheita.py
from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Colheita(Base):
    """
    Registro de colheita. Somente inserção: não há caminho de edição/remoção.
    """
    __tablename__ = "colheita"

    colheita_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    planejamento_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("planejamento.planejamento_id"), nullable=False, index=True)
    propriedade_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"), nullable=False, index=True)
    cultura_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("cultura.cultura_id"), nullable=False)

    # Área é informativa; a conciliação usa apenas planejamento_id
    setor_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("setor.setor_id"))
    lote_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("lote.lote_id"))
    canteiro_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("canteiro.canteiro_id"))

    data_colheita: Mapped[date] = mapped_column(Date, nullable=False)
    quantidade_colhida: Mapped[Decimal] = mapped_column(Numeric(14, 3), nullable=False)
    unidade: Mapped[str] = mapped_column(String(3), default="kg", nullable=False)  # kg / t / sc
    destino: Mapped[str] = mapped_column(String(20), nullable=False)
    area_colhida: Mapped[Decimal | None] = mapped_column(Numeric(14, 4))        # ha
    produtividade_real: Mapped[Decimal | None] = mapped_column(Numeric(14, 3))  # massa/ha
    observacoes: Mapped[str | None] = mapped_column(Text())

    created_by: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("usuario.usuario_id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    planejamento: Mapped["Planejamento"] = relationship("Planejamento", back_populates="colheitas")
