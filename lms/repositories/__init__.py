"""
Módulo de repositórios - acesso a dados.
"""

from lms.repositories.base import BaseRepository
from lms.repositories.user import UserRepository
from lms.repositories.book import BookRepository
from lms.repositories.reservation import ReservationRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "ReservationRepository",
]
