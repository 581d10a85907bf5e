# utils/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class CampoInvalidoError(Exception):
    """
    Falha de regra de negócio atrelada a um campo do payload.
    Não é um erro fatal: vira 422 com o mesmo formato das validações do FastAPI.
    """

    def __init__(self, campo: str, mensagem: str, tipo: str = "value_error"):
        super().__init__(mensagem)
        self.campo = campo
        self.mensagem = mensagem
        self.tipo = tipo

    def as_error(self) -> dict:
        return {"loc": ["body", self.campo], "msg": self.mensagem, "type": self.tipo}


def _normalize_errors(errs):
    norm = []
    for e in errs:
        e = dict(e)
        val = e.get("input")
        if isinstance(val, (bytes, bytearray)):
            e["input"] = val.decode("utf-8", errors="ignore")
        # ctx pode carregar exceções não serializáveis (ex.: ValueError de validators)
        if "ctx" in e:
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        norm.append(e)
    return norm


def install_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "detail": _normalize_errors(exc.errors())},
        )

    @app.exception_handler(CampoInvalidoError)
    async def campo_invalido_handler(request: Request, exc: CampoInvalidoError):
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "detail": [exc.as_error()]},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_handler(request: Request, exc: IntegrityError):
        return JSONResponse(status_code=409, content={"error": "conflict", "detail": str(exc.orig)})

    @app.exception_handler(SQLAlchemyError)
    async def store_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Falha no banco em %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content={"error": "store_unavailable", "detail": "Banco de dados indisponível; tente novamente"},
        )
