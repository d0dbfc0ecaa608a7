"""
Módulo Ubicaciones - Árbol de almacenamiento

ubicación → armario / estantería → cajón / estante / organizador →
división / cajoncito

Funcionalidades:
- Resolución recursiva de todos los nodos descendientes de una ubicación
- Contenido de una ubicación (repuestos y componentes) con paginación
- Estadísticas de unidades por categoría

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: LocationHierarchyResolver y LocationContentsService
- repository.py: Acceso a datos (SQLAlchemy)
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as locations_router
from .service import LocationContentsService, LocationHierarchyResolver
from .repository import LocationRepository

__all__ = [
    "locations_router",
    "LocationContentsService",
    "LocationHierarchyResolver",
    "LocationRepository"
]
