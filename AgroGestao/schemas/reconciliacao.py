# schemas/reconciliacao.py
"""
Registros explícitos usados pela conciliação planejado x colhido.

As linhas ORM são convertidas nestes snapshots na fronteira de acesso a dados;
o motor de conciliação só trabalha com eles.
"""
from __future__ import annotations

from decimal import Decimal
from pydantic import Field

from enums.enums import PlanejamentoStatusEnum
from schemas.shared import ORMModel


class PlanoSnapshot(ORMModel):
    planejamento_id: int
    area_plantada: Decimal | None = None
    produtividade_esperada: Decimal | None = None
    status: PlanejamentoStatusEnum = PlanejamentoStatusEnum.planejado


class ColheitaSnapshot(ORMModel):
    colheita_id: int | None = None
    planejamento_id: int
    quantidade_colhida: Decimal = Field(..., gt=0)


class ResumoPlanejamentoOut(ORMModel):
    planejamento_id: int
    status: str
    quantidade_planejada: float | None   # None = sem teto definido
    quantidade_colhida: float
    saldo_a_colher: float | None
    progresso_pct: float | None
    total_colheitas: int
