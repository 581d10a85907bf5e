# services/planejamento_service.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from fastapi import HTTPException
from sqlalchemy.orm import Session

from config.settings import settings
from enums.enums import PlanejamentoStatusEnum
from models.cultura import Cultura
from models.planejamento import Planejamento
from models.propriedade import Propriedade, Setor, Lote, Canteiro
from schemas.planejamento import PlanejamentoCreate
from utils.locks import plan_locks, LockTimeoutError
from utils.transactions import uow

logger = logging.getLogger(__name__)

_AREA_MODELS = {
    "setor": Setor,
    "lote": Lote,
    "canteiro": Canteiro,
}

# Transições permitidas por ação do usuário; 'concluido' só pela conciliação
_TRANSICOES_USUARIO = {
    PlanejamentoStatusEnum.em_andamento: {PlanejamentoStatusEnum.planejado},
    PlanejamentoStatusEnum.cancelado: {PlanejamentoStatusEnum.planejado, PlanejamentoStatusEnum.em_andamento},
}


def ensure_area_in_property(db: Session, area_tipo: str, area_id: int, propriedade_id: int):
    model = _AREA_MODELS[area_tipo]
    area = db.get(model, area_id)
    if not area:
        raise HTTPException(status_code=404, detail=f"{area_tipo.capitalize()} não encontrado")
    if area.propriedade_id != propriedade_id:
        raise HTTPException(status_code=409, detail=f"{area_tipo.capitalize()} não pertence à propriedade")
    return area


def create_plan(db: Session, payload: PlanejamentoCreate, created_by_user_id: int | None) -> Planejamento:
    if not db.get(Propriedade, payload.propriedade_id):
        raise HTTPException(status_code=404, detail="Propriedade não encontrada")

    cultura = db.get(Cultura, payload.cultura_id)
    if not cultura:
        raise HTTPException(status_code=404, detail="Cultura não encontrada")
    if cultura.propriedade_id != payload.propriedade_id:
        raise HTTPException(status_code=409, detail="Cultura não pertence à propriedade")

    ensure_area_in_property(db, payload.area_tipo, payload.area_id, payload.propriedade_id)

    plan = Planejamento(
        propriedade_id=payload.propriedade_id,
        cultura_id=payload.cultura_id,
        area_tipo=payload.area_tipo,
        setor_id=payload.setor_id,
        lote_id=payload.lote_id,
        canteiro_id=payload.canteiro_id,
        data_inicio=payload.data_inicio,
        data_fim_prevista=payload.data_fim_prevista,
        area_plantada=payload.area_plantada,
        produtividade_esperada=payload.produtividade_esperada,
        status=PlanejamentoStatusEnum.planejado.value,
        observacoes=payload.observacoes,
        created_by=created_by_user_id,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info("Planejamento %s criado na propriedade %s", plan.planejamento_id, plan.propriedade_id)
    return plan


def list_plans(db: Session, propriedade_id: int, status: PlanejamentoStatusEnum | None = None) -> list[Planejamento]:
    q = db.query(Planejamento).filter(Planejamento.propriedade_id == propriedade_id)
    if status is not None:
        q = q.filter(Planejamento.status == status.value)
    return q.order_by(Planejamento.data_inicio.desc(), Planejamento.planejamento_id.desc()).all()


def get_plan(db: Session, planejamento_id: int, for_update: bool = False) -> Planejamento:
    """
    Carrega o planejamento (404 se não existir).
    for_update=True bloqueia a linha (SELECT ... FOR UPDATE) nos bancos que suportam.
    """
    q = db.query(Planejamento).filter(Planejamento.planejamento_id == planejamento_id)
    if for_update:
        q = q.with_for_update().populate_existing()
    plan = q.first()
    if not plan:
        raise HTTPException(status_code=404, detail="Planejamento não encontrado")
    return plan


@contextmanager
def plan_lock(planejamento_id: int) -> Iterator[None]:
    """
    Serializa toda escrita de status/colheitas de um planejamento.
    Timeout aguardando o lock vira 409.
    """
    try:
        with plan_locks.hold(planejamento_id, timeout=settings.RECONCILIACAO_LOCK_TIMEOUT_S):
            yield
    except LockTimeoutError:
        logger.warning("Timeout aguardando lock do planejamento %s", planejamento_id)
        raise HTTPException(
            status_code=409,
            detail="Planejamento ocupado por outra operação; tente novamente"
        )


def set_plan_status(
        db: Session,
        planejamento_id: int,
        status: PlanejamentoStatusEnum,
        somente_de: Iterable[PlanejamentoStatusEnum] | None = None,
) -> Planejamento:
    """
    Grava o status e faz commit. Erros do banco propagam para o chamador.

    Com `somente_de`, relê a linha bloqueada e só grava se o status atual
    estiver no conjunto; caso contrário devolve o planejamento inalterado.
    """
    permitidos = None if somente_de is None else {s.value for s in somente_de}
    with uow(db):
        plan = get_plan(db, planejamento_id, for_update=permitidos is not None)
        if permitidos is None or plan.status in permitidos:
            plan.status = status.value
            db.add(plan)
    db.refresh(plan)
    return plan


def _transition_by_user(db: Session, planejamento_id: int, novo: PlanejamentoStatusEnum) -> Planejamento:
    with plan_lock(planejamento_id):
        db.rollback()
        plan = get_plan(db, planejamento_id, for_update=True)
        atual = PlanejamentoStatusEnum(plan.status)
        if atual == novo:
            db.rollback()
            return plan  # idempotente
        if atual not in _TRANSICOES_USUARIO[novo]:
            db.rollback()
            raise HTTPException(
                status_code=409,
                detail=f"Transição inválida: {atual.value} -> {novo.value}"
            )
        plan = set_plan_status(db, planejamento_id, novo, somente_de=_TRANSICOES_USUARIO[novo])
    logger.info("Planejamento %s: %s -> %s", planejamento_id, atual.value, novo.value)
    return plan


def start_plan(db: Session, planejamento_id: int) -> Planejamento:
    return _transition_by_user(db, planejamento_id, PlanejamentoStatusEnum.em_andamento)


def cancel_plan(db: Session, planejamento_id: int) -> Planejamento:
    return _transition_by_user(db, planejamento_id, PlanejamentoStatusEnum.cancelado)
