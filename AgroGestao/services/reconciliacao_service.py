# services/reconciliacao_service.py
"""
Conciliação planejado x colhido.

Funções puras sobre argumentos explícitos (planejamento, colheitas, quantidade
proposta); nenhuma consulta ao banco acontece aqui, exceto a gravação do status
em maybe_complete_plan.

Quantidades são tratadas como Decimal: a soma é exata e não depende da ordem
dos registros.

Regra de teto:
- quantidade planejada = area_plantada × produtividade_esperada
- se área ou produtividade faltar, não há teto (None): qualquer colheita é aceita
  e o planejamento nunca é concluído automaticamente
- teto zero (área ou produtividade = 0) é um teto definido
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from enums.enums import PlanejamentoStatusEnum
from schemas.reconciliacao import PlanoSnapshot, ColheitaSnapshot
from services.planejamento_service import set_plan_status

logger = logging.getLogger(__name__)

MSG_EXCEDE_PLANEJADO = "A quantidade colhida não pode exceder a quantidade planejada"

# Somente estes status podem passar a concluido
_STATUS_ABERTOS = (PlanejamentoStatusEnum.planejado, PlanejamentoStatusEnum.em_andamento)


class ConclusaoPlanejamentoError(Exception):
    """
    A colheita já foi gravada, mas o status 'concluido' não pôde ser escrito.
    Estado intermediário legítimo: pode ser refeito com reconciliar_planejamento.
    """

    def __init__(self, planejamento_id: int, causa: Exception):
        super().__init__(f"Falha ao concluir planejamento {planejamento_id}: {causa}")
        self.planejamento_id = planejamento_id
        self.causa = causa


def _to_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return d if d.is_finite() else None


def compute_planned_quantity(plano: PlanoSnapshot) -> Decimal | None:
    """
    area_plantada × produtividade_esperada, ou None quando não há teto.
    """
    area = _to_decimal(plano.area_plantada)
    produtividade = _to_decimal(plano.produtividade_esperada)
    if area is None or produtividade is None:
        return None
    return area * produtividade


def cumulative_harvested(planejamento_id: int, colheitas: Iterable[ColheitaSnapshot]) -> Decimal:
    """
    Soma de quantidade_colhida das colheitas do planejamento, na ordem de inserção.
    Registros de outros planejamentos são ignorados.
    """
    total = Decimal("0")
    for c in colheitas:
        if c.planejamento_id == planejamento_id:
            total += _to_decimal(c.quantidade_colhida) or Decimal("0")
    return total


def _check_proposed(quantidade) -> Decimal:
    proposta = _to_decimal(quantidade)
    if proposta is None or proposta <= 0:
        raise ValueError(f"Quantidade proposta inválida: {quantidade!r} (deve ser número finito > 0)")
    return proposta


def validate_new_harvest(
        plano: PlanoSnapshot,
        colheitas_existentes: Iterable[ColheitaSnapshot],
        quantidade_proposta,
) -> bool:
    """
    Aceita a nova colheita se (colhido + proposto) <= planejado. Limite inclusivo.
    Sem teto definido, aceita sempre.

    Raises:
        ValueError: quantidade_proposta não numérica, não finita ou <= 0 (erro do chamador)
    """
    proposta = _check_proposed(quantidade_proposta)
    planejada = compute_planned_quantity(plano)
    if planejada is None:
        return True
    novo_total = cumulative_harvested(plano.planejamento_id, colheitas_existentes) + proposta
    return novo_total <= planejada


def should_complete(plano: PlanoSnapshot, colheitas: Iterable[ColheitaSnapshot]) -> bool:
    """
    Decide, sem efeitos colaterais, se o planejamento deve passar a 'concluido'.
    """
    if plano.status == PlanejamentoStatusEnum.cancelado:
        return False
    planejada = compute_planned_quantity(plano)
    if planejada is None:
        return False
    return cumulative_harvested(plano.planejamento_id, colheitas) >= planejada


def maybe_complete_plan(
        db: Session,
        plano: PlanoSnapshot,
        colheitas_incluindo_nova: Iterable[ColheitaSnapshot],
) -> PlanejamentoStatusEnum:
    """
    Grava status 'concluido' quando o colhido atinge o planejado.

    Idempotente: planejamento já concluído não é regravado.
    Retorna o status resultante (possivelmente inalterado).

    Raises:
        ConclusaoPlanejamentoError: falha do banco ao gravar o status. A colheita
        já gravada NÃO é desfeita.
    """
    if plano.status == PlanejamentoStatusEnum.concluido:
        return plano.status
    if not should_complete(plano, colheitas_incluindo_nova):
        return plano.status

    try:
        plan = set_plan_status(
            db, plano.planejamento_id, PlanejamentoStatusEnum.concluido, somente_de=_STATUS_ABERTOS
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Colheita gravada, mas planejamento %s não foi concluído: %s", plano.planejamento_id, e)
        raise ConclusaoPlanejamentoError(plano.planejamento_id, e) from e

    atual = PlanejamentoStatusEnum(plan.status)
    if atual != PlanejamentoStatusEnum.concluido:
        # Status mudou desde a leitura (ex.: cancelado); não é sobrescrito
        logger.info("Planejamento %s não concluído: status atual é %s", plano.planejamento_id, atual.value)
        return atual

    logger.info("Planejamento %s concluído: colhido atingiu o planejado", plano.planejamento_id)
    return atual
