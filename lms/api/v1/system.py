"""
Endpoints de Sistema (LIBRARIAN).

Contratos:
    - GET /system/inventory-audit: Compara contadores de cópias com reservas aprovadas

A devolução grava dois registros sem transação comum; se o processo cair
entre eles, o contador fica para trás. Esta auditoria é o caminho de
reconciliação: ela só lê, a correção é feita editando o livro.
"""

from fastapi import APIRouter

from lms.core.deps import DbSession, LibrarianUser
from lms.schemas.reservation import InventoryAuditReport
from lms.services.inventory import InventoryCoordinator

router = APIRouter(prefix="/system", tags=["System (Librarian)"])


@router.get(
    "/inventory-audit",
    response_model=InventoryAuditReport,
    summary="Auditar inventário",
    description="Lista livros cujo available_copies difere de total_copies menos reservas aprovadas.",
)
async def inventory_audit(
    db: DbSession,
    librarian: LibrarianUser,
) -> InventoryAuditReport:
    return await InventoryCoordinator(db).audit()
