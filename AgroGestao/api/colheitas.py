# api/colheitas.py
from __future__ import annotations
from datetime import date
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from enums.enums import AreaTipoEnum
from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_user_in_property_or_admin
from models.usuario import Usuario
from schemas.colheita import ColheitaCreate, ColheitaOut, RegistroColheitaOut
from services.planejamento_service import get_plan
from services.colheita_service import (
    registrar_colheita, get_colheita, list_colheitas, list_colheitas_planejamento
)

router = APIRouter(tags=["colheitas"])


@router.post(
    "/planejamentos/{planejamento_id}/colheitas",
    response_model=RegistroColheitaOut,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar colheita",
    description=(
            "Registra uma colheita vinculada ao planejamento.\n\n"
            "**Conciliação automática:**\n"
            "1. Valida `quantidade_colhida` contra o saldo: "
            "`colhido + proposto <= area_plantada × produtividade_esperada` (limite inclusivo)\n"
            "2. Se exceder → 422 com erro no campo `quantidade_colhida`\n"
            "3. Grava a colheita\n"
            "4. Se o colhido atingir o planejado → planejamento passa a `concluido`\n\n"
            "**Sem teto:** se o planejamento não tem área plantada ou produtividade esperada, "
            "qualquer quantidade positiva é aceita e ele nunca é concluído automaticamente.\n\n"
            "**Falha parcial:** se a colheita for gravada mas o status não puder ser atualizado, "
            "a resposta é 201 com `aviso` preenchido; use `/planejamentos/{id}/reconciliar`.\n\n"
            "Registros concorrentes no mesmo planejamento são serializados."
    )
)
def post_colheita(
        planejamento_id: int = Path(..., gt=0, description="ID do planejamento"),
        payload: ColheitaCreate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    plan = get_plan(db, planejamento_id)
    ensure_user_in_property_or_admin(current_user, plan.propriedade_id)
    return registrar_colheita(db, planejamento_id, payload, created_by_user_id=current_user.usuario_id)


@router.get(
    "/planejamentos/{planejamento_id}/colheitas",
    response_model=list[ColheitaOut],
    summary="Listar colheitas do planejamento",
    description="Em ordem de registro."
)
def get_colheitas_planejamento(
        planejamento_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    plan = get_plan(db, planejamento_id)
    ensure_user_in_property_or_admin(current_user, plan.propriedade_id)
    return list_colheitas_planejamento(db, planejamento_id)


@router.get(
    "/propriedades/{propriedade_id}/colheitas",
    response_model=list[ColheitaOut],
    summary="Listar colheitas da propriedade",
    description=(
            "Filtros opcionais:\n"
            "- `area_tipo` + `area_id`: colheitas de um setor, lote ou canteiro\n"
            "- `data_de` / `data_ate`: intervalo inclusivo de datas"
    )
)
def get_colheitas_propriedade(
        propriedade_id: int = Path(..., gt=0),
        area_tipo: AreaTipoEnum | None = Query(None),
        area_id: int | None = Query(None, gt=0),
        data_de: date | None = Query(None),
        data_ate: date | None = Query(None),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return list_colheitas(db, propriedade_id, area_tipo, area_id, data_de, data_ate)


@router.get("/colheitas/{colheita_id}", response_model=ColheitaOut, summary="Obter colheita")
def get_colheita_by_id(
        colheita_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    colheita = get_colheita(db, colheita_id)
    ensure_user_in_property_or_admin(current_user, colheita.propriedade_id)
    return colheita
