from fastapi import APIRouter, FastAPI

from .auth import router as auth_router
from .chat import router as chat_router
from .match import router as match_router
from .profile import router as profile_router
from .upload import router as upload_router


def include_modular_routers(app: FastAPI) -> None:
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(profile_router, tags=["users"])
    app.include_router(match_router, tags=["matches"])
    app.include_router(chat_router, tags=["chat"])
    app.include_router(upload_router, tags=["upload"])


__all__ = ["include_modular_routers", "APIRouter"]
