"""
Módulo Stock - Stock distribuido de repuestos y componentes

El stock de un item no se almacena: es la suma de las cantidades de sus
asociaciones con nodos del árbol de almacenamiento (armarios, estanterías,
estantes, cajones, divisiones, cajoncitos).

Funcionalidades:
- Stock de un item con desglose por ubicación y ruta jerárquica legible
- Cálculo por lotes con omisión de los items que fallan
- Consulta de repuestos en stock bajo (total <= stock mínimo)
- Recálculo completo para comprobaciones de integridad

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de cálculo (StockCalculator)
- repository.py: Acceso a datos (SQLAlchemy)
- domain.py: Tipos de dominio y contratos de persistencia
- paths.py: Formato de rutas de ubicación
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as stock_router
from .service import StockCalculator
from .repository import StockRepository

__all__ = [
    "stock_router",
    "StockCalculator",
    "StockRepository"
]
