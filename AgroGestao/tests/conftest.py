import os
import tempfile

# Configuração precisa existir antes de importar config.settings
_TMP_DIR = tempfile.mkdtemp(prefix="agrogestao-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'agrogestao.db')}"
os.environ.setdefault("SECRET_KEY", "chave-de-testes")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from main import app
from models import Base, Propriedade, Setor, Lote, Cultura, Planejamento, Colheita, Usuario
from utils.db import engine, SessionLocal
from utils.security import criar_token_acesso, hash_senha


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(_schema):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


# ============================================================================
# Usuários e autenticação
# ============================================================================

def _make_user(db, username, *, admin=False, propriedade_id=None, password="senha123"):
    user = Usuario(
        username=username,
        nome=username.capitalize(),
        email=f"{username}@agro.local",
        password_hash=hash_senha(password),
        status="a",
        is_admin_global=admin,
        propriedade_id=propriedade_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {criar_token_acesso(user.usuario_id)}"}


@pytest.fixture
def admin(db):
    return _make_user(db, "admin", admin=True)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def operador(db, propriedade):
    return _make_user(db, "operador", propriedade_id=propriedade.propriedade_id)


# ============================================================================
# Cadastros
# ============================================================================

@pytest.fixture
def propriedade(db):
    prop = Propriedade(nome="Fazenda Boa Vista", localizacao="Sorriso - MT", tamanho_ha=Decimal("120"))
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


@pytest.fixture
def outra_propriedade(db):
    prop = Propriedade(nome="Sítio Esperança", localizacao="Lavras - MG", tamanho_ha=Decimal("15"))
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


@pytest.fixture
def setor(db, propriedade):
    s = Setor(propriedade_id=propriedade.propriedade_id, nome="Setor Norte", area_ha=Decimal("40"))
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@pytest.fixture
def lote(db, propriedade, setor):
    lt = Lote(propriedade_id=propriedade.propriedade_id, setor_id=setor.setor_id, nome="Lote 1", area_ha=Decimal("10"))
    db.add(lt)
    db.commit()
    db.refresh(lt)
    return lt


@pytest.fixture
def cultura(db, propriedade):
    c = Cultura(propriedade_id=propriedade.propriedade_id, nome="Milho", variedade="AG 8088", ciclo_estimado_dias=120)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture
def make_plan(db, propriedade, cultura, setor):
    """Cria planejamentos no setor padrão. Padrão: 10 ha × 2 t/ha = 20 t, em andamento."""
    def _make(area_plantada=Decimal("10"), produtividade_esperada=Decimal("2"), status="em_andamento"):
        plan = Planejamento(
            propriedade_id=propriedade.propriedade_id,
            cultura_id=cultura.cultura_id,
            area_tipo="setor",
            setor_id=setor.setor_id,
            data_inicio=date(2026, 3, 1),
            data_fim_prevista=date(2026, 9, 30),
            area_plantada=area_plantada,
            produtividade_esperada=produtividade_esperada,
            status=status,
        )
        db.add(plan)
        db.commit()
        db.refresh(plan)
        return plan
    return _make


@pytest.fixture
def add_harvest(db):
    """Insere colheitas direto no banco, sem passar pela conciliação."""
    def _add(plan, quantidade, data=date(2026, 8, 1)):
        c = Colheita(
            planejamento_id=plan.planejamento_id,
            propriedade_id=plan.propriedade_id,
            cultura_id=plan.cultura_id,
            setor_id=plan.setor_id,
            data_colheita=data,
            quantidade_colhida=Decimal(str(quantidade)),
            unidade="t",
            destino="venda",
        )
        db.add(c)
        db.commit()
        db.refresh(c)
        return c
    return _add


def harvest_payload(quantidade, **extra) -> dict:
    payload = {
        "data_colheita": "2026-08-15",
        "quantidade_colhida": quantidade,
        "unidade": "t",
        "destino": "venda",
    }
    payload.update(extra)
    return payload
