# schemas/colheita.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator

from enums.enums import UnidadeColheitaEnum, DestinoColheitaEnum
from schemas.shared import ORMModel

# Maior valor em Numeric(14, 3)
PRODUTIVIDADE_MAX = Decimal("99999999999.999")


class ColheitaCreate(BaseModel):
    """
    Payload de registro de colheita. O planejamento vem da rota.
    Se nenhuma área for informada, a área do planejamento é usada.
    """
    data_colheita: date
    quantidade_colhida: Decimal = Field(..., gt=0, max_digits=14, decimal_places=3,
                                        description="Quantidade colhida (> 0)")
    unidade: UnidadeColheitaEnum = UnidadeColheitaEnum.kg
    destino: DestinoColheitaEnum
    setor_id: int | None = Field(None, gt=0)
    lote_id: int | None = Field(None, gt=0)
    canteiro_id: int | None = Field(None, gt=0)
    area_colhida: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=4)
    produtividade_real: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=3)
    observacoes: str | None = None

    @model_validator(mode="after")
    def _no_maximo_uma_area(self):
        informadas = [v for v in (self.setor_id, self.lote_id, self.canteiro_id) if v is not None]
        if len(informadas) > 1:
            raise ValueError("Informe no máximo uma área (setor_id, lote_id ou canteiro_id)")
        return self

    @model_validator(mode="after")
    def _produtividade_representavel(self):
        if self.produtividade_real is None and self.area_colhida:
            if self.quantidade_colhida / self.area_colhida > PRODUTIVIDADE_MAX:
                raise ValueError("area_colhida pequena demais para a quantidade colhida")
        return self


class ColheitaOut(ORMModel):
    colheita_id: int
    planejamento_id: int
    propriedade_id: int
    cultura_id: int
    setor_id: int | None
    lote_id: int | None
    canteiro_id: int | None
    data_colheita: date
    quantidade_colhida: float
    unidade: str
    destino: str
    area_colhida: float | None
    produtividade_real: float | None
    observacoes: str | None
    created_at: datetime


class RegistroColheitaOut(BaseModel):
    """
    Resultado do registro: a colheita gravada e o desfecho da conclusão do planejamento.
    `aviso` vem preenchido quando a colheita foi gravada mas o status não pôde ser atualizado.
    """
    colheita: ColheitaOut
    planejamento_status: str
    planejamento_concluido: bool
    aviso: str | None = None
