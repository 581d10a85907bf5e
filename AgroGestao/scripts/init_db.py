# Execute a partir da raiz do app (AgroGestao/):
#   python -m scripts.init_db --username admin --email admin@agro.local --password admin123 --nome Administrador
#
# Cria as tabelas que ainda não existem e garante um administrador global.

import logging
from argparse import ArgumentParser

from sqlalchemy.orm import Session

from models import Base, Usuario
from utils.db import engine, SessionLocal
from utils.security import hash_senha

logger = logging.getLogger("scripts.init_db")


def upsert_admin(db: Session, *, username: str, email: str, password: str, nome: str) -> Usuario:
    user = (
        db.query(Usuario)
        .filter((Usuario.username == username) | (Usuario.email == email))
        .first()
    )
    if user is None:
        user = Usuario(username=username, email=email)
        db.add(user)

    user.nome = nome
    user.password_hash = hash_senha(password)
    user.status = "a"
    user.is_admin_global = True
    user.propriedade_id = None
    db.commit()
    db.refresh(user)
    return user


def main():
    parser = ArgumentParser(description="Cria o schema e o administrador inicial")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", default="admin@agro.local")
    parser.add_argument("--password", required=True)
    parser.add_argument("--nome", default="Administrador")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    Base.metadata.create_all(bind=engine)
    logger.info("Schema verificado/criado")

    with SessionLocal() as db:
        user = upsert_admin(db, username=args.username, email=args.email, password=args.password, nome=args.nome)
        logger.info("Admin pronto: usuario_id=%s username=%s", user.usuario_id, user.username)


if __name__ == "__main__":
    main()
