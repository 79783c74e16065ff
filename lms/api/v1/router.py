"""
Router principal da API v1.
"""

from fastapi import APIRouter

from lms.api.v1.auth import router as auth_router
from lms.api.v1.books import router as books_router
from lms.api.v1.reservations import router as reservations_router
from lms.api.v1.system import router as system_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router)
api_router.include_router(books_router)
api_router.include_router(reservations_router)
api_router.include_router(system_router)
