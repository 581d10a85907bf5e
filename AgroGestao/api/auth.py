# api/auth.py
"""
API de autenticação.
Endpoints: login, me, cadastro de usuários (admin).
"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_admin_global
from schemas.usuario import Token, UsuarioOut, UsuarioCreate
from services.auth_service import authenticate_user, issue_access_token, create_user
from models.usuario import Usuario

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/token",
    response_model=Token,
    summary="Login (OAuth2)",
    description=(
        "Autenticação via OAuth2 Password Flow.\n\n"
        "**Formato:** `application/x-www-form-urlencoded`\n\n"
        "**Response:**\n"
        "- `access_token`: token JWT para o header `Authorization: Bearer <token>`\n"
        "- `token_type`: sempre `bearer`"
    )
)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = authenticate_user(db, form_data.username, form_data.password)
    token = issue_access_token(user)
    return {"access_token": token, "token_type": "bearer"}


@router.get(
    "/me",
    response_model=UsuarioOut,
    summary="Usuário atual",
)
def me(current_user: Usuario = Depends(get_current_user)):
    return current_user


@router.post(
    "/usuarios",
    response_model=UsuarioOut,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar usuário",
    description="Somente administradores globais. Usuários comuns precisam de `propriedade_id`."
)
def post_usuario(
    payload: UsuarioCreate,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    ensure_admin_global(current_user)
    return create_user(db, payload)
