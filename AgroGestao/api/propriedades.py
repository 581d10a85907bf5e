# api/propriedades.py
from __future__ import annotations
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_user_in_property_or_admin, ensure_admin_global
from models.usuario import Usuario
from schemas.propriedade import (
    PropriedadeCreate, PropriedadeOut,
    SetorCreate, SetorOut, LoteCreate, LoteOut, CanteiroCreate, CanteiroOut,
)
from schemas.cultura import CulturaCreate, CulturaOut
from services import propriedade_service as svc

router = APIRouter(prefix="/propriedades", tags=["propriedades"])


@router.post(
    "",
    response_model=PropriedadeOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar propriedade",
    description="Somente administradores globais."
)
def post_propriedade(
        payload: PropriedadeCreate,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_admin_global(current_user)
    return svc.create_propriedade(db, payload)


@router.get(
    "",
    response_model=list[PropriedadeOut],
    summary="Listar propriedades",
    description="Admin global vê todas; demais usuários, apenas a sua."
)
def get_propriedades(
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    if current_user.is_admin_global:
        return svc.list_propriedades(db)
    ids = [current_user.propriedade_id] if current_user.propriedade_id is not None else []
    return svc.list_propriedades(db, only_ids=ids)


@router.get("/{propriedade_id}", response_model=PropriedadeOut, summary="Obter propriedade")
def get_propriedade(
        propriedade_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.get_propriedade(db, propriedade_id)


# ====== Setores / lotes / canteiros ======

@router.post(
    "/{propriedade_id}/setores",
    response_model=SetorOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar setor",
)
def post_setor(
        propriedade_id: int = Path(..., gt=0),
        payload: SetorCreate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.create_setor(db, propriedade_id, payload)


@router.get("/{propriedade_id}/setores", response_model=list[SetorOut], summary="Listar setores")
def get_setores(
        propriedade_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.list_setores(db, propriedade_id)


@router.post(
    "/{propriedade_id}/lotes",
    response_model=LoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar lote",
)
def post_lote(
        propriedade_id: int = Path(..., gt=0),
        payload: LoteCreate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.create_lote(db, propriedade_id, payload)


@router.get("/{propriedade_id}/lotes", response_model=list[LoteOut], summary="Listar lotes")
def get_lotes(
        propriedade_id: int = Path(..., gt=0),
        setor_id: int | None = Query(None, gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.list_lotes(db, propriedade_id, setor_id)


@router.post(
    "/{propriedade_id}/canteiros",
    response_model=CanteiroOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar canteiro",
)
def post_canteiro(
        propriedade_id: int = Path(..., gt=0),
        payload: CanteiroCreate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.create_canteiro(db, propriedade_id, payload)


@router.get("/{propriedade_id}/canteiros", response_model=list[CanteiroOut], summary="Listar canteiros")
def get_canteiros(
        propriedade_id: int = Path(..., gt=0),
        lote_id: int | None = Query(None, gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.list_canteiros(db, propriedade_id, lote_id)


# ====== Culturas ======

@router.post(
    "/{propriedade_id}/culturas",
    response_model=CulturaOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar cultura",
)
def post_cultura(
        propriedade_id: int = Path(..., gt=0),
        payload: CulturaCreate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.create_cultura(db, propriedade_id, payload)


@router.get("/{propriedade_id}/culturas", response_model=list[CulturaOut], summary="Listar culturas")
def get_culturas(
        propriedade_id: int = Path(..., gt=0),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user),
):
    ensure_user_in_property_or_admin(current_user, propriedade_id)
    return svc.list_culturas(db, propriedade_id)
