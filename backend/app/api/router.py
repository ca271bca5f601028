from fastapi import APIRouter
from app.api.routers import auth, users, imports

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
