# api/planejamentos.py
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from enums.enums import PlanejamentoStatusEnum
from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_user_in_property_or_admin
from models.usuario import Usuario
from schemas.planejamento import PlanejamentoCreate, PlanejamentoOut
from schemas.reconciliacao import ResumoPlanejamentoOut
from services.planejamento_service import create_plan, list_plans, get_plan, start_plan, cancel_plan
from services.colheita_service import reconciliar_planejamento
from services.reconciliacao_service import ConclusaoPlanejamentoError
from services.relatorio_service import resumo_planejamento, saldo_a_colher

router = APIRouter(tags=["planejamentos"])


def _plan_for_user(db: Session, planejamento_id: int, user: Usuario):
    plan = get_plan(db, planejamento_id)
    ensure_user_in_property_or_admin(user, plan.propriedade_id)
    return plan


@router.post(
    "/planejamentos",
    response_model=PlanejamentoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar planejamento",
    description=(
            "Cria um planejamento de plantio com status inicial `planejado`.\n\n"
            "**Área:** informe `area_tipo` e exatamente o id correspondente "
            "(`setor_id`, `lote_id` ou `canteiro_id`).\n\n"
            "**Quantidade planejada:** `area_plantada × produtividade_esperada`. "
            "Se um dos dois faltar, o planejamento não tem teto de colheita."
    )
)
def post_planejamento(
        payload: PlanejamentoCreate,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, payload.propriedade_id)
    return create_plan(db, payload, created_by_user_id=current_user.usuario_id)


@router.get(
    "/propriedades/{propriedade_id}/planejamentos",
    response_model=list[PlanejamentoOut],
    summary="Listar planejamentos da propriedade",
)
def get_planejamentos(
        propriedade_id: int = Path(..., gt=0),
        status_filter: PlanejamentoStatusEnum | None = Query(None, alias="status"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return list_plans(db, propriedade_id, status_filter)


@router.get(
    "/planejamentos/{planejamento_id}",
    response_model=PlanejamentoOut,
    summary="Obter planejamento",
)
def get_planejamento(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    return _plan_for_user(db, planejamento_id, current_user)


@router.post(
    "/planejamentos/{planejamento_id}/iniciar",
    response_model=PlanejamentoOut,
    summary="Iniciar planejamento",
    description="Transição `planejado` → `em_andamento`. Idempotente."
)
def post_iniciar(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    _plan_for_user(db, planejamento_id, current_user)
    return start_plan(db, planejamento_id)


@router.post(
    "/planejamentos/{planejamento_id}/cancelar",
    response_model=PlanejamentoOut,
    summary="Cancelar planejamento",
    description=(
            "Transição `planejado | em_andamento` → `cancelado`.\n\n"
            "Planejamentos concluídos não podem ser cancelados. "
            "Colheitas já registradas são mantidas."
    )
)
def post_cancelar(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    _plan_for_user(db, planejamento_id, current_user)
    return cancel_plan(db, planejamento_id)


@router.post(
    "/planejamentos/{planejamento_id}/reconciliar",
    response_model=PlanejamentoOut,
    summary="Reaplicar conclusão automática",
    description=(
            "Reavalia o planejamento contra as colheitas gravadas e o marca como "
            "`concluido` se o colhido já atingiu o planejado.\n\n"
            "Usado para recuperar o caso em que a colheita foi gravada mas a "
            "atualização de status falhou."
    )
)
def post_reconciliar(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    _plan_for_user(db, planejamento_id, current_user)
    try:
        return reconciliar_planejamento(db, planejamento_id)
    except ConclusaoPlanejamentoError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get(
    "/planejamentos/{planejamento_id}/resumo",
    response_model=ResumoPlanejamentoOut,
    summary="Planejado x colhido",
    description=(
            "Quantidade planejada, colhida, saldo a colher e progresso.\n\n"
            "Sem teto definido, `quantidade_planejada`, `saldo_a_colher` e "
            "`progresso_pct` vêm nulos."
    )
)
def get_resumo(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    _plan_for_user(db, planejamento_id, current_user)
    return resumo_planejamento(db, planejamento_id)


@router.get(
    "/propriedades/{propriedade_id}/saldo-a-colher",
    response_model=list[ResumoPlanejamentoOut],
    summary="Saldo a colher da propriedade",
    description="Resumo planejado x colhido de todos os planejamentos não cancelados."
)
def get_saldo_a_colher(
        propriedade_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return saldo_a_colher(db, propriedade_id)
