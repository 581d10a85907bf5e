from sqlalchemy import BigInteger, Integer, create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from config.settings import settings

# SQLite (dev/testes) precisa compartilhar a conexão entre threads do servidor
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=_connect_args,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

class Base(DeclarativeBase):
    pass

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# PKs BIGINT no MySQL/Postgres; no SQLite só INTEGER PRIMARY KEY é autoincremental
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")
