from decimal import Decimal
from itertools import permutations

import pytest
from sqlalchemy.exc import OperationalError

from enums.enums import PlanejamentoStatusEnum
from models import Planejamento
from schemas.reconciliacao import PlanoSnapshot, ColheitaSnapshot
from services import reconciliacao_service
from services.reconciliacao_service import (
    compute_planned_quantity,
    cumulative_harvested,
    validate_new_harvest,
    should_complete,
    maybe_complete_plan,
    ConclusaoPlanejamentoError,
)


def plano(area="10", produtividade="2", status="em_andamento", planejamento_id=1):
    return PlanoSnapshot(
        planejamento_id=planejamento_id,
        area_plantada=None if area is None else Decimal(area),
        produtividade_esperada=None if produtividade is None else Decimal(produtividade),
        status=status,
    )


def colheitas(*quantidades, planejamento_id=1):
    return [
        ColheitaSnapshot(colheita_id=i + 1, planejamento_id=planejamento_id, quantidade_colhida=Decimal(str(q)))
        for i, q in enumerate(quantidades)
    ]


# ============================================================================
# Quantidade planejada
# ============================================================================

def test_planned_quantity_is_area_times_yield():
    assert compute_planned_quantity(plano("10", "2")) == Decimal("20")


@pytest.mark.parametrize("area,produtividade", [(None, "2"), ("10", None), (None, None)])
def test_planned_quantity_without_area_or_yield_has_no_ceiling(area, produtividade):
    assert compute_planned_quantity(plano(area, produtividade)) is None


def test_zero_area_is_a_defined_ceiling_not_missing():
    planejada = compute_planned_quantity(plano("0", "2"))
    assert planejada is not None
    assert planejada == 0
    assert validate_new_harvest(plano("0", "2"), [], Decimal("0.1")) is False


# ============================================================================
# Total colhido
# ============================================================================

def test_cumulative_ignores_other_plans():
    registros = colheitas(5, 10) + colheitas(100, planejamento_id=2)
    assert cumulative_harvested(1, registros) == Decimal("15")
    assert cumulative_harvested(2, registros) == Decimal("100")
    assert cumulative_harvested(3, registros) == Decimal("0")


def test_cumulative_is_order_independent():
    registros = colheitas("0.1", "0.2", "0.3", "7.125")
    totais = {cumulative_harvested(1, list(p)) for p in permutations(registros)}
    assert totais == {Decimal("7.725")}


# ============================================================================
# Validação de nova colheita
# ============================================================================

@pytest.mark.parametrize(
    "existentes,proposta,aceita",
    [
        ((), "20", True),
        ((15,), "5", True),          # Cenário A: fecha exatamente o planejado
        ((15,), "6", False),         # Cenário B
        ((15,), "5.001", False),     # planejado + epsilon
        ((8, 7), "4.999", True),
        ((20,), "0.001", False),
    ],
)
def test_accepts_iff_total_within_planned(existentes, proposta, aceita):
    assert validate_new_harvest(plano(), colheitas(*existentes), Decimal(proposta)) is aceita


def test_no_ceiling_accepts_any_positive_quantity():
    sem_area = plano(area=None)
    assert validate_new_harvest(sem_area, colheitas(1_000_000), Decimal("999999"))
    assert validate_new_harvest(sem_area, [], 0.001)


def test_accepts_float_and_int_inputs():
    assert validate_new_harvest(plano(), colheitas(15), 5) is True
    assert validate_new_harvest(plano(), colheitas(15), 5.0) is True
    assert validate_new_harvest(plano(), colheitas(15), 5.5) is False


@pytest.mark.parametrize("invalida", [0, -1, Decimal("-0.5"), float("nan"), float("inf"), "abc", None, True])
def test_invalid_proposed_quantity_is_caller_error(invalida):
    with pytest.raises(ValueError):
        validate_new_harvest(plano(), [], invalida)


def test_unserialized_submissions_can_both_pass_against_same_snapshot():
    # Duas requisições leem o mesmo total (0) antes de qualquer gravação:
    # cada uma, isoladamente, cabe no planejado, mas juntas somam 24 > 20.
    snapshot = colheitas()
    assert validate_new_harvest(plano(), snapshot, Decimal("12"))
    assert validate_new_harvest(plano(), snapshot, Decimal("12"))
    # Serializadas, a segunda enxerga a primeira e é rejeitada
    assert not validate_new_harvest(plano(), colheitas(12), Decimal("12"))


# ============================================================================
# Conclusão do planejamento
# ============================================================================

def test_should_complete_when_total_reaches_planned():
    assert should_complete(plano(), colheitas(15, 5))
    assert should_complete(plano(), colheitas(15, 6))
    assert not should_complete(plano(), colheitas(15, 4.999))


def test_should_not_complete_without_ceiling_or_when_cancelled():
    assert not should_complete(plano(area=None), colheitas(10_000))
    assert not should_complete(plano(status="cancelado"), colheitas(20))


def test_maybe_complete_plan_writes_status(db, make_plan):
    plan = make_plan()
    snap = PlanoSnapshot.model_validate(plan)

    status = maybe_complete_plan(db, snap, colheitas(15, 5, planejamento_id=plan.planejamento_id))

    assert status == PlanejamentoStatusEnum.concluido
    db.refresh(plan)
    assert plan.status == "concluido"


def test_maybe_complete_plan_is_idempotent(db, make_plan):
    plan = make_plan()
    snap = PlanoSnapshot.model_validate(plan)
    registros = colheitas(20, planejamento_id=plan.planejamento_id)

    primeiro = maybe_complete_plan(db, snap, registros)
    segundo = maybe_complete_plan(db, snap, registros)

    assert primeiro == segundo == PlanejamentoStatusEnum.concluido
    db.refresh(plan)
    assert plan.status == "concluido"


def test_maybe_complete_plan_already_completed_skips_write(db, make_plan, monkeypatch):
    plan = make_plan(status="concluido")
    chamadas = []
    monkeypatch.setattr(reconciliacao_service, "set_plan_status", lambda *a, **k: chamadas.append(a))

    status = maybe_complete_plan(db, PlanoSnapshot.model_validate(plan), colheitas(20, planejamento_id=plan.planejamento_id))

    assert status == PlanejamentoStatusEnum.concluido
    assert chamadas == []


def test_maybe_complete_plan_below_planned_keeps_status(db, make_plan):
    plan = make_plan()
    status = maybe_complete_plan(db, PlanoSnapshot.model_validate(plan), colheitas(19.999, planejamento_id=plan.planejamento_id))
    assert status == PlanejamentoStatusEnum.em_andamento
    db.refresh(plan)
    assert plan.status == "em_andamento"


def test_plan_without_ceiling_never_auto_completes(db, make_plan):
    plan = make_plan(area_plantada=None)
    status = maybe_complete_plan(db, PlanoSnapshot.model_validate(plan), colheitas(1_000_000, planejamento_id=plan.planejamento_id))
    assert status == PlanejamentoStatusEnum.em_andamento
    assert db.get(Planejamento, plan.planejamento_id).status == "em_andamento"


def test_store_failure_is_reported(db, make_plan, monkeypatch):
    plan = make_plan()

    def _falha(*args, **kwargs):
        raise OperationalError("UPDATE planejamento", {}, Exception("banco indisponível"))

    monkeypatch.setattr(reconciliacao_service, "set_plan_status", _falha)

    with pytest.raises(ConclusaoPlanejamentoError) as exc:
        maybe_complete_plan(db, PlanoSnapshot.model_validate(plan), colheitas(20, planejamento_id=plan.planejamento_id))
    assert exc.value.planejamento_id == plan.planejamento_id
    assert isinstance(exc.value.causa, OperationalError)


def test_completion_does_not_overwrite_status_changed_after_read(db, make_plan):
    plan = make_plan()
    snap = PlanoSnapshot.model_validate(plan)  # lido como em_andamento
    plan.status = "cancelado"
    db.commit()

    status = maybe_complete_plan(db, snap, colheitas(20, planejamento_id=plan.planejamento_id))

    assert status == PlanejamentoStatusEnum.cancelado
    db.expire_all()
    assert db.get(Planejamento, plan.planejamento_id).status == "cancelado"
