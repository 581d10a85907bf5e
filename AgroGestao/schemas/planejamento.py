# schemas/planejamento.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from pydantic import BaseModel, Field, model_validator

from schemas.shared import ORMModel


class PlanejamentoCreate(BaseModel):
    propriedade_id: int = Field(..., gt=0)
    cultura_id: int = Field(..., gt=0)
    area_tipo: Literal["setor", "lote", "canteiro"]
    setor_id: int | None = Field(None, gt=0)
    lote_id: int | None = Field(None, gt=0)
    canteiro_id: int | None = Field(None, gt=0)
    data_inicio: date
    data_fim_prevista: date
    area_plantada: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=4, description="Hectares")
    produtividade_esperada: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=3, description="Massa por hectare")
    observacoes: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def _check_area(self):
        ids = {"setor": self.setor_id, "lote": self.lote_id, "canteiro": self.canteiro_id}
        informados = [k for k, v in ids.items() if v is not None]
        if informados != [self.area_tipo]:
            raise ValueError(f"Informe somente {self.area_tipo}_id, de acordo com area_tipo")
        return self

    @model_validator(mode="after")
    def _check_datas(self):
        if self.data_inicio > self.data_fim_prevista:
            raise ValueError("data_inicio não pode ser maior que data_fim_prevista")
        return self

    @property
    def area_id(self) -> int:
        return {"setor": self.setor_id, "lote": self.lote_id, "canteiro": self.canteiro_id}[self.area_tipo]


class PlanejamentoOut(ORMModel):
    planejamento_id: int
    propriedade_id: int
    cultura_id: int
    area_tipo: str
    setor_id: int | None
    lote_id: int | None
    canteiro_id: int | None
    data_inicio: date
    data_fim_prevista: date
    area_plantada: float | None
    produtividade_esperada: float | None
    status: str
    observacoes: str | None
    created_at: datetime
    updated_at: datetime
