from fastapi import APIRouter
from .auth import router as auth_router
from .propriedades import router as propriedades_router
from .planejamentos import router as planejamentos_router
from .colheitas import router as colheitas_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(propriedades_router)
api_router.include_router(planejamentos_router)
api_router.include_router(colheitas_router)
