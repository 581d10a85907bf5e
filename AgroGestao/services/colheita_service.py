# services/colheita_service.py
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from enums.enums import AreaTipoEnum, PlanejamentoStatusEnum
from models.colheita import Colheita
from models.planejamento import Planejamento
from schemas.colheita import ColheitaCreate
from schemas.reconciliacao import ColheitaSnapshot, PlanoSnapshot
from services.planejamento_service import get_plan, ensure_area_in_property, plan_lock
from services.reconciliacao_service import (
    validate_new_harvest, maybe_complete_plan,
    ConclusaoPlanejamentoError, MSG_EXCEDE_PLANEJADO,
)
from utils.errors import CampoInvalidoError
from utils.transactions import uow

logger = logging.getLogger(__name__)

_STATUS_FECHADOS = {PlanejamentoStatusEnum.cancelado.value, PlanejamentoStatusEnum.concluido.value}


# =============== Livro de colheitas =================

def list_colheitas_planejamento(db: Session, planejamento_id: int) -> list[Colheita]:
    return (
        db.query(Colheita)
        .filter(Colheita.planejamento_id == planejamento_id)
        .order_by(Colheita.colheita_id.asc())
        .all()
    )


def list_harvests_for_plan(db: Session, planejamento_id: int) -> list[ColheitaSnapshot]:
    """
    Colheitas do planejamento em ordem de inserção, já validadas como snapshots.
    """
    return [ColheitaSnapshot.model_validate(r) for r in list_colheitas_planejamento(db, planejamento_id)]


def _area_da_colheita(db: Session, plan: Planejamento, payload: ColheitaCreate) -> dict:
    informada = {
        "setor": payload.setor_id,
        "lote": payload.lote_id,
        "canteiro": payload.canteiro_id,
    }
    for tipo, area_id in informada.items():
        if area_id is not None:
            ensure_area_in_property(db, tipo, area_id, plan.propriedade_id)
            return {f"{tipo}_id": area_id}
    # Sem área informada: herda a área do planejamento
    tipo = AreaTipoEnum(plan.area_tipo).value
    return {f"{tipo}_id": getattr(plan, f"{tipo}_id")}


def _produtividade_real(payload: ColheitaCreate) -> Decimal | None:
    if payload.produtividade_real is not None:
        return payload.produtividade_real
    if payload.area_colhida:
        return (payload.quantidade_colhida / payload.area_colhida).quantize(Decimal("0.001"))
    return None


def append_harvest(
        db: Session,
        plan: Planejamento,
        payload: ColheitaCreate,
        created_by_user_id: int | None,
) -> Colheita:
    """
    Grava a colheita (commit próprio). Não altera o planejamento.
    """
    colheita = Colheita(
        planejamento_id=plan.planejamento_id,
        propriedade_id=plan.propriedade_id,
        cultura_id=plan.cultura_id,
        data_colheita=payload.data_colheita,
        quantidade_colhida=payload.quantidade_colhida,
        unidade=payload.unidade.value,
        destino=payload.destino.value,
        area_colhida=payload.area_colhida,
        produtividade_real=_produtividade_real(payload),
        observacoes=payload.observacoes,
        created_by=created_by_user_id,
        **_area_da_colheita(db, plan, payload),
    )
    with uow(db):
        db.add(colheita)
    db.refresh(colheita)
    return colheita


# =============== Registro com conciliação =================

def registrar_colheita(
        db: Session,
        planejamento_id: int,
        payload: ColheitaCreate,
        created_by_user_id: int | None,
) -> dict:
    """
    Fluxo completo de registro de uma colheita:

    1. Obtém o lock do planejamento (serializa registros concorrentes)
    2. Valida a quantidade contra o saldo do planejamento
    3. Grava a colheita (commit)
    4. Conclui o planejamento se o colhido atingiu o planejado

    Os passos 3 e 4 não formam uma transação: se o 4 falhar, a colheita
    permanece gravada e o retorno traz `aviso`.

    Raises:
        CampoInvalidoError: quantidade excede o saldo planejado (422)
        HTTPException: 404 planejamento inexistente, 409 planejamento fechado ou ocupado
    """
    with plan_lock(planejamento_id):
        return _registrar_sob_lock(db, planejamento_id, payload, created_by_user_id)


def _registrar_sob_lock(
        db: Session,
        planejamento_id: int,
        payload: ColheitaCreate,
        created_by_user_id: int | None,
) -> dict:
    # Encerra qualquer leitura anterior ao lock para enxergar os totais mais recentes
    db.rollback()

    plan = get_plan(db, planejamento_id, for_update=True)
    if plan.status in _STATUS_FECHADOS:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail=f"Planejamento com status '{plan.status}' não aceita novas colheitas"
        )

    plano = PlanoSnapshot.model_validate(plan)
    existentes = list_harvests_for_plan(db, planejamento_id)

    if not validate_new_harvest(plano, existentes, payload.quantidade_colhida):
        db.rollback()
        logger.info(
            "Colheita rejeitada no planejamento %s: %s excede o saldo",
            planejamento_id, payload.quantidade_colhida,
        )
        raise CampoInvalidoError(
            "quantidade_colhida", MSG_EXCEDE_PLANEJADO, tipo="value_error.quantidade_excede_planejado"
        )

    colheita = append_harvest(db, plan, payload, created_by_user_id)
    logger.info(
        "Colheita %s registrada no planejamento %s (%s %s)",
        colheita.colheita_id, planejamento_id, colheita.quantidade_colhida, colheita.unidade,
    )

    todas = existentes + [ColheitaSnapshot.model_validate(colheita)]
    aviso = None
    try:
        status = maybe_complete_plan(db, plano, todas)
    except ConclusaoPlanejamentoError as e:
        status = plano.status
        aviso = (
            "Colheita registrada, mas não foi possível concluir o planejamento; "
            f"tente novamente em /planejamentos/{planejamento_id}/reconciliar ({e.causa.__class__.__name__})"
        )

    return {
        "colheita": colheita,
        "planejamento_status": status.value,
        "planejamento_concluido": status == PlanejamentoStatusEnum.concluido,
        "aviso": aviso,
    }


def reconciliar_planejamento(db: Session, planejamento_id: int) -> Planejamento:
    """
    Reaplica a regra de conclusão sobre as colheitas gravadas.
    Recupera o estado 'colheita gravada, planejamento não concluído'.

    Raises:
        ConclusaoPlanejamentoError: se a gravação do status falhar novamente
        HTTPException: 409 se o planejamento estiver ocupado
    """
    with plan_lock(planejamento_id):
        db.rollback()
        plan = get_plan(db, planejamento_id, for_update=True)
        plano = PlanoSnapshot.model_validate(plan)
        maybe_complete_plan(db, plano, list_harvests_for_plan(db, planejamento_id))
        db.commit()
        return get_plan(db, planejamento_id)


# =============== Consultas =================

def get_colheita(db: Session, colheita_id: int) -> Colheita:
    colheita = db.get(Colheita, colheita_id)
    if not colheita:
        raise HTTPException(status_code=404, detail="Colheita não encontrada")
    return colheita


def list_colheitas(
        db: Session,
        propriedade_id: int,
        area_tipo: AreaTipoEnum | None = None,
        area_id: int | None = None,
        data_de: date | None = None,
        data_ate: date | None = None,
) -> list[Colheita]:
    if (area_tipo is None) != (area_id is None):
        raise HTTPException(status_code=422, detail="area_tipo e area_id devem ser informados juntos")
    if data_de and data_ate and data_de > data_ate:
        raise HTTPException(status_code=422, detail="data_de não pode ser maior que data_ate")

    q = db.query(Colheita).filter(Colheita.propriedade_id == propriedade_id)
    if area_tipo is not None:
        q = q.filter(getattr(Colheita, f"{area_tipo.value}_id") == area_id)
    if data_de:
        q = q.filter(Colheita.data_colheita >= data_de)
    if data_ate:
        q = q.filter(Colheita.data_colheita <= data_ate)
    return q.order_by(Colheita.data_colheita.desc(), Colheita.colheita_id.desc()).all()
