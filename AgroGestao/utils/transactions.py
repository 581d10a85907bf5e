# utils/transactions.py
import logging
from contextlib import contextmanager

from sqlalchemy.orm import Session

from utils.db import SessionLocal

logger = logging.getLogger(__name__)


@contextmanager
def uow(session: Session | None = None):
    """
    Uso:
        with uow(db) as db:
            ... # operações
        # commit/rollback automático
    Se já houver uma sessão vinda de get_db(), passe-a para não abrir outra.
    """
    owns_session = session is None
    db = session or SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        logger.debug("Rollback da unidade de trabalho", exc_info=True)
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()
