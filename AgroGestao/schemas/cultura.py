from decimal import Decimal
from pydantic import BaseModel, Field

from schemas.shared import ORMModel


class CulturaCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=120)
    variedade: str | None = Field(None, max_length=120)
    ciclo_estimado_dias: int | None = Field(None, gt=0)
    produtividade: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=3)


class CulturaOut(ORMModel):
    cultura_id: int
    propriedade_id: int
    nome: str
    variedade: str | None
    ciclo_estimado_dias: int | None
    produtividade: float | None
