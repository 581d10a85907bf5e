# utils/security.py
"""
Hash de senhas (passlib/bcrypt) e tokens de acesso JWT (python-jose).
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def hash_senha(plain: str) -> str:
    return pwd_context.hash(plain)


def verificar_senha(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def senha_precisa_rehash(hashed: str) -> bool:
    """True quando o hash foi gerado com parâmetros que o contexto considera obsoletos."""
    return pwd_context.needs_update(hashed)


def criar_token_acesso(
        usuario_id: int,
        propriedade_id: int | None = None,
        expires_minutes: int | None = None,
) -> str:
    agora = datetime.now(timezone.utc)
    expira = agora + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": str(usuario_id), "iat": agora, "exp": expira}
    if propriedade_id is not None:
        claims["prop"] = propriedade_id
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decodificar_token(token: str) -> Optional[dict]:
    """Retorna as claims do token ou None se inválido/expirado."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
