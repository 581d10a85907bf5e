# services/relatorio_service.py
"""
Relatórios de produção: planejado x colhido por planejamento e saldo a colher
por propriedade.
"""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from enums.enums import PlanejamentoStatusEnum
from models.planejamento import Planejamento
from schemas.reconciliacao import PlanoSnapshot, ColheitaSnapshot
from services.colheita_service import list_harvests_for_plan
from services.planejamento_service import get_plan
from services.reconciliacao_service import compute_planned_quantity, cumulative_harvested


def _resumo(plano: PlanoSnapshot, colheitas: list[ColheitaSnapshot]) -> dict:
    planejada = compute_planned_quantity(plano)
    colhida = cumulative_harvested(plano.planejamento_id, colheitas)

    saldo = None
    progresso = None
    if planejada is not None:
        saldo = max(planejada - colhida, Decimal("0"))
        if planejada > 0:
            progresso = round(float(colhida / planejada * 100), 2)
        else:
            progresso = 100.0  # teto zero já está atingido

    return {
        "planejamento_id": plano.planejamento_id,
        "status": plano.status.value,
        "quantidade_planejada": float(planejada) if planejada is not None else None,
        "quantidade_colhida": float(colhida),
        "saldo_a_colher": float(saldo) if saldo is not None else None,
        "progresso_pct": progresso,
        "total_colheitas": len(colheitas),
    }


def resumo_planejamento(db: Session, planejamento_id: int) -> dict:
    plan = get_plan(db, planejamento_id)
    return _resumo(PlanoSnapshot.model_validate(plan), list_harvests_for_plan(db, planejamento_id))


def saldo_a_colher(db: Session, propriedade_id: int) -> list[dict]:
    """
    Resumo de todos os planejamentos não cancelados da propriedade.
    """
    plans = (
        db.query(Planejamento)
        .filter(
            Planejamento.propriedade_id == propriedade_id,
            Planejamento.status != PlanejamentoStatusEnum.cancelado.value,
        )
        .order_by(Planejamento.data_inicio.asc(), Planejamento.planejamento_id.asc())
        .all()
    )
    return [
        _resumo(PlanoSnapshot.model_validate(p), list_harvests_for_plan(db, p.planejamento_id))
        for p in plans
    ]
