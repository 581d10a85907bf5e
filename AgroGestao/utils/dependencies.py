from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.security import oauth2_scheme, decodificar_token
from enums.enums import UsuarioStatusEnum
from models.usuario import Usuario

def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> Usuario:
    payload = decodificar_token(token)
    if not payload or "sub" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado")
    user = db.get(Usuario, user_id)
    if not user or user.status != UsuarioStatusEnum.a.value:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuário não encontrado ou inativo")
    return user
