# models/usuario.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, BigInteger, CHAR, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Usuario(Base):
    __tablename__ = "usuario"

    usuario_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    nome: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(CHAR(1), default="a", nullable=False)  # a/i
    is_admin_global: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Propriedade em que o usuário trabalha (None para admins globais)
    propriedade_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("propriedade.propriedade_id"))
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)
