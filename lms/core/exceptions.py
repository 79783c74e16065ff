"""
Exceções de domínio do serviço de reservas.

Services e repositories levantam estas exceções; o handler registrado em
lms.main as converte em resposta de falha ({"success": false, ...}) com o
status HTTP correspondente. A camada de apresentação só precisa distinguir
sucesso de falha.

Taxonomia:
    - ValidationError: entrada malformada ou fora de faixa
    - NotFoundError: identificador inexistente
    - ConflictError: violação de invariante ou unicidade
    - InvalidTransitionError: mudança de status ilegal
    - UnavailableError: sem cópias disponíveis
    - PermissionDeniedError: usuário não pode operar sobre o registro
    - BackendUnavailableError: falha ou timeout do banco
"""

from fastapi import status


class LibraryError(Exception):
    """Exceção base de todas as falhas de negócio."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "library_error"
    default_message: str = "Operação não pôde ser concluída"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LibraryError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "validation_error"
    default_message = "Dados inválidos"


class NotFoundError(LibraryError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    default_message = "Registro não encontrado"


class ConflictError(LibraryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"
    default_message = "Operação conflita com o estado atual"


class InvalidTransitionError(LibraryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "invalid_transition"
    default_message = "Transição de status inválida"


class UnavailableError(LibraryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "unavailable"
    default_message = "Não há cópias disponíveis"


class PermissionDeniedError(LibraryError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    default_message = "Você não tem permissão para esta operação"


class BackendUnavailableError(LibraryError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "backend_unavailable"
    default_message = "Banco de dados indisponível. Tente novamente."
