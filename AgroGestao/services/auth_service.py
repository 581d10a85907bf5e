# services/auth_service.py
"""
Serviço de autenticação.
Login, emissão de tokens JWT e criação de usuários.
"""
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from utils.security import verificar_senha, hash_senha, senha_precisa_rehash, criar_token_acesso
from utils.datetime_utils import now_local
from enums.enums import UsuarioStatusEnum
from models.usuario import Usuario
from schemas.usuario import UsuarioCreate

logger = logging.getLogger(__name__)


def authenticate_user(db: Session, username: str, password: str) -> Usuario:
    """
    Autentica usuário com username e senha.

    Raises:
        HTTPException: credenciais inválidas ou usuário inativo
    """
    user = db.query(Usuario).filter(Usuario.username == username).first()

    if not user or user.status != UsuarioStatusEnum.a.value or not verificar_senha(password, user.password_hash):
        logger.info("Login recusado para '%s'", username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if senha_precisa_rehash(user.password_hash):
        user.password_hash = hash_senha(password)

    user.last_login_at = now_local()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def issue_access_token(user: Usuario) -> str:
    return criar_token_acesso(user.usuario_id, propriedade_id=user.propriedade_id)


def create_user(db: Session, payload: UsuarioCreate) -> Usuario:
    if db.query(Usuario).filter(Usuario.username == payload.username).first():
        raise HTTPException(status_code=409, detail="Username já cadastrado")
    if not payload.is_admin_global and payload.propriedade_id is None:
        raise HTTPException(status_code=422, detail="Usuário comum precisa de propriedade_id")

    user = Usuario(
        username=payload.username,
        nome=payload.nome,
        email=payload.email,
        password_hash=hash_senha(payload.password),
        status=UsuarioStatusEnum.a.value,
        is_admin_global=payload.is_admin_global,
        propriedade_id=payload.propriedade_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
