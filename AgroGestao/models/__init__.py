# models/__init__.py
from utils.db import Base  # re-export
from .propriedade import Propriedade, Setor, Lote, Canteiro
from .usuario import Usuario
from .cultura import Cultura
from .planejamento import Planejamento
from .colheita import Colheita
