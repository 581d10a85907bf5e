# schemas/shared.py
from __future__ import annotations

from pydantic import BaseModel


# -------------------------------------------------------------------
# Base comum para todos os schemas (Pydantic v2)
# -------------------------------------------------------------------
class ORMModel(BaseModel):
    """
    Modelo base para schemas.
    - from_attributes=True: permite construir o schema a partir de objetos ORM.
    - str_strip_whitespace=True: limpa espaços em strings.
    """
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }


__all__ = [
    "ORMModel",
]
