"""
Módulo de serviços - lógica de negócio.
"""

from lms.services.auth import AuthService
from lms.services.catalog import CatalogService
from lms.services.ledger import ReservationLedger, ReservationListing
from lms.services.inventory import InventoryCoordinator

__all__ = [
    "AuthService",
    "CatalogService",
    "ReservationLedger",
    "ReservationListing",
    "InventoryCoordinator",
]
