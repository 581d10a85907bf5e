from pydantic import BaseModel, Field

from schemas.shared import ORMModel


class UsuarioCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    nome: str = Field(..., min_length=1, max_length=80)
    email: str = Field(..., max_length=120, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    is_admin_global: bool = False
    propriedade_id: int | None = None


class UsuarioOut(ORMModel):
    usuario_id: int
    username: str
    nome: str
    email: str
    status: str
    is_admin_global: bool
    propriedade_id: int | None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
