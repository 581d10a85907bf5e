# services/propriedade_service.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.cultura import Cultura
from models.propriedade import Propriedade, Setor, Lote, Canteiro
from schemas.cultura import CulturaCreate
from schemas.propriedade import PropriedadeCreate, SetorCreate, LoteCreate, CanteiroCreate


def get_propriedade(db: Session, propriedade_id: int) -> Propriedade:
    prop = db.get(Propriedade, propriedade_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Propriedade não encontrada")
    return prop


def create_propriedade(db: Session, payload: PropriedadeCreate) -> Propriedade:
    prop = Propriedade(**payload.model_dump())
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def list_propriedades(db: Session, only_ids: list[int] | None = None) -> list[Propriedade]:
    q = db.query(Propriedade)
    if only_ids is not None:
        q = q.filter(Propriedade.propriedade_id.in_(only_ids))
    return q.order_by(Propriedade.nome.asc()).all()


# ====== Setores / lotes / canteiros ======

def create_setor(db: Session, propriedade_id: int, payload: SetorCreate) -> Setor:
    get_propriedade(db, propriedade_id)
    setor = Setor(propriedade_id=propriedade_id, **payload.model_dump())
    db.add(setor)
    db.commit()
    db.refresh(setor)
    return setor


def create_lote(db: Session, propriedade_id: int, payload: LoteCreate) -> Lote:
    setor = db.get(Setor, payload.setor_id)
    if not setor or setor.propriedade_id != propriedade_id:
        raise HTTPException(status_code=404, detail="Setor não encontrado nesta propriedade")
    lote = Lote(propriedade_id=propriedade_id, **payload.model_dump())
    db.add(lote)
    db.commit()
    db.refresh(lote)
    return lote


def create_canteiro(db: Session, propriedade_id: int, payload: CanteiroCreate) -> Canteiro:
    lote = db.get(Lote, payload.lote_id)
    if not lote or lote.propriedade_id != propriedade_id:
        raise HTTPException(status_code=404, detail="Lote não encontrado nesta propriedade")
    canteiro = Canteiro(propriedade_id=propriedade_id, **payload.model_dump())
    db.add(canteiro)
    db.commit()
    db.refresh(canteiro)
    return canteiro


def list_setores(db: Session, propriedade_id: int) -> list[Setor]:
    return db.query(Setor).filter(Setor.propriedade_id == propriedade_id).order_by(Setor.nome.asc()).all()


def list_lotes(db: Session, propriedade_id: int, setor_id: int | None = None) -> list[Lote]:
    q = db.query(Lote).filter(Lote.propriedade_id == propriedade_id)
    if setor_id is not None:
        q = q.filter(Lote.setor_id == setor_id)
    return q.order_by(Lote.nome.asc()).all()


def list_canteiros(db: Session, propriedade_id: int, lote_id: int | None = None) -> list[Canteiro]:
    q = db.query(Canteiro).filter(Canteiro.propriedade_id == propriedade_id)
    if lote_id is not None:
        q = q.filter(Canteiro.lote_id == lote_id)
    return q.order_by(Canteiro.nome.asc()).all()


# ====== Culturas ======

def create_cultura(db: Session, propriedade_id: int, payload: CulturaCreate) -> Cultura:
    get_propriedade(db, propriedade_id)
    cultura = Cultura(propriedade_id=propriedade_id, **payload.model_dump())
    db.add(cultura)
    db.commit()
    db.refresh(cultura)
    return cultura


def list_culturas(db: Session, propriedade_id: int) -> list[Cultura]:
    return db.query(Cultura).filter(Cultura.propriedade_id == propriedade_id).order_by(Cultura.nome.asc()).all()
