from enum import Enum

# =====================================================
# 🔐 USUÁRIOS / ACESSOS
# =====================================================
class UsuarioStatusEnum(str, Enum):
    a = "a"  # Ativo
    i = "i"  # Inativo


# =====================================================
# 🗺️ ÁREAS DE PLANTIO
# =====================================================
class AreaTipoEnum(str, Enum):
    setor = "setor"
    lote = "lote"
    canteiro = "canteiro"


# =====================================================
# 📋 PLANEJAMENTOS
# =====================================================
class PlanejamentoStatusEnum(str, Enum):
    planejado = "planejado"
    em_andamento = "em_andamento"
    concluido = "concluido"  # Escrito apenas pela conciliação
    cancelado = "cancelado"


# =====================================================
# 🌾 COLHEITAS
# =====================================================
class UnidadeColheitaEnum(str, Enum):
    kg = "kg"  # Quilograma
    t = "t"    # Tonelada
    sc = "sc"  # Saco


class DestinoColheitaEnum(str, Enum):
    venda = "venda"
    consumo_proprio = "consumo_proprio"
    armazenamento = "armazenamento"
    processamento = "processamento"
