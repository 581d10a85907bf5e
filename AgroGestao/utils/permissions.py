"""
Autorização por propriedade.

- Admin Global (is_admin_global=True): acesso a todas as propriedades
- Demais usuários: apenas à propriedade vinculada (usuario.propriedade_id)
"""
from fastapi import HTTPException, status

from models.usuario import Usuario


def user_can_access_property(user: Usuario, propriedade_id: int) -> bool:
    if user.is_admin_global:
        return True
    return user.propriedade_id is not None and user.propriedade_id == propriedade_id


def ensure_user_in_property_or_admin(user: Usuario, propriedade_id: int) -> None:
    """
    Lança 403 se o usuário não pode operar sobre a propriedade.
    """
    if not user_can_access_property(user, propriedade_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sem acesso a esta propriedade"
        )


def ensure_admin_global(user: Usuario) -> None:
    if not user.is_admin_global:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operação restrita a administradores"
        )
