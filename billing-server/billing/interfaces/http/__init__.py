from fastapi import APIRouter

from billing.interfaces.http.routers import payments


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(payments.router, prefix="/payments", tags=["payments"])
    return router


__all__ = [
    "create_api_router",
]
