# schemas/propriedade.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from schemas.shared import ORMModel


class PropriedadeCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=150)
    localizacao: str = Field(..., min_length=1, max_length=200)
    tamanho_ha: Decimal = Field(..., gt=0, max_digits=14, decimal_places=4)
    nif: str | None = Field(None, max_length=30)


class PropriedadeOut(ORMModel):
    propriedade_id: int
    nome: str
    localizacao: str
    tamanho_ha: float
    nif: str | None
    created_at: datetime


# ====== Áreas de plantio ======

class _AreaBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=120)
    area_ha: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=4)
    descricao: str | None = None


class SetorCreate(_AreaBase):
    pass


class LoteCreate(_AreaBase):
    setor_id: int = Field(..., gt=0)


class CanteiroCreate(_AreaBase):
    lote_id: int = Field(..., gt=0)


class SetorOut(ORMModel):
    setor_id: int
    propriedade_id: int
    nome: str
    area_ha: float | None
    descricao: str | None


class LoteOut(ORMModel):
    lote_id: int
    setor_id: int
    propriedade_id: int
    nome: str
    area_ha: float | None
    descricao: str | None


class CanteiroOut(ORMModel):
    canteiro_id: int
    lote_id: int
    propriedade_id: int
    nome: str
    area_ha: float | None
    descricao: str | None
