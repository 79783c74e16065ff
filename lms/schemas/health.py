"""
Schemas Pydantic para o endpoint de healthcheck.
"""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta do endpoint de healthcheck.

    Attributes:
        status: "healthy" se o banco responde, "degraded" caso contrário
        app_name: Nome da aplicação
        environment: Ambiente atual (development, staging, production)
        database: Estado da conexão com o banco
        cache: Estado da conexão com o Redis (opcional para o serviço)
    """

    status: Literal["healthy", "degraded"]
    app_name: str
    environment: str
    database: Literal["up", "down"]
    cache: Literal["up", "down"]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Library Reservations API",
                    "environment": "development",
                    "database": "up",
                    "cache": "down",
                }
            ]
        }
    }
