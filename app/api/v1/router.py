# app/api/v1/router.py
from fastapi import APIRouter

from app.config.settings import settings
from app.modules.stock import stock_router
from app.modules.locations import locations_router


# Crear router principal de la API v1
api_router = APIRouter()

# ==================== MÓDULOS ====================

api_router.include_router(stock_router)      # /api/v1/stock/...
api_router.include_router(locations_router)  # /api/v1/ubicaciones/...

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "stock": "/api/v1/stock",
            "item_stock": "/api/v1/stock/{item_type}/{item_id}",
            "recalculate": "/api/v1/stock/recalculate",
            "location_contents": "/api/v1/ubicaciones/{id}/contents",
            "location_descendants": "/api/v1/ubicaciones/{id}/descendants",
            "location_stats": "/api/v1/ubicaciones/{id}/stats"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "modules": {
            "stock": {
                "status": "active",
                "features": [
                    "Stock distribuido por item",
                    "Stock bajo de repuestos",
                    "Recálculo completo"
                ]
            },
            "ubicaciones": {
                "status": "active",
                "features": [
                    "Descendientes de una ubicación",
                    "Contenido de una ubicación",
                    "Estadísticas por categoría"
                ]
            }
        }
    }
