"""
Schemas Pydantic da aplicação.
"""

from lms.schemas.base import (
    BaseSchema,
    ErrorResponse,
    OperationResult,
    PaginatedResponse,
    TimestampSchema,
)
from lms.schemas.health import HealthResponse
from lms.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserRead,
    UserWithToken,
)
from lms.schemas.book import (
    BookAvailability,
    BookCreate,
    BookRead,
    BookUpdate,
)
from lms.schemas.reservation import (
    InventoryAuditReport,
    InventoryDiscrepancy,
    ReservationCreate,
    ReservationDetail,
    ReservationRead,
)

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    "OperationResult",
    "PaginatedResponse",
    "TimestampSchema",
    # Health
    "HealthResponse",
    # User
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserWithToken",
    # Book
    "BookAvailability",
    "BookCreate",
    "BookRead",
    "BookUpdate",
    # Reservation
    "InventoryAuditReport",
    "InventoryDiscrepancy",
    "ReservationCreate",
    "ReservationDetail",
    "ReservationRead",
]
