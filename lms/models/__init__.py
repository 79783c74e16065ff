"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que create_all encontre todas as tabelas.
"""

from lms.models.enums import UserRole, ReservationStatus
from lms.models.user import User
from lms.models.book import Book
from lms.models.reservation import Reservation

__all__ = [
    "UserRole",
    "ReservationStatus",
    "User",
    "Book",
    "Reservation",
]
