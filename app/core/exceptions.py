import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.schemas import ApiResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Error base del dominio de inventario"""


class NotFoundError(InventoryError):
    """Un ID de item o de ubicación no existe en el almacén"""


class ItemNotFoundError(NotFoundError):
    def __init__(self, item_label: str, item_id: str):
        self.item_id = item_id
        super().__init__(f"{item_label} con ID {item_id} no encontrado")


class LocationNotFoundError(NotFoundError):
    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"Ubicación con ID {location_id} no encontrada")


class DataIntegrityError(InventoryError):
    """Registro persistido que viola un invariante del modelo"""


def _envelope(http_status: int, error: str, details=None, headers=None) -> JSONResponse:
    body = ApiResponse(success=False, error=error, details=details)
    return JSONResponse(status_code=http_status, content=body.model_dump(exclude_none=True), headers=headers)


def setup_exception_handlers(app: FastAPI):
    """Traduce errores del dominio al sobre {success, data, error}"""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _envelope(status.HTTP_404_NOT_FOUND, str(exc))

    # Incluye los 404 de rutas inexistentes y los 405 que genera Starlette
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [error.get("msg", "") for error in exc.errors()]
        return _envelope(422, "Parámetros inválidos", details)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Error no controlado en {request.method} {request.url.path}")
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
