# app/modules/locations/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.modules.stock.schemas import StockCalculationOptions
from app.shared.schemas import ApiResponse
from .schemas import ContentsFilter, LocationContents, LocationDescendants, LocationStockStats
from .service import LocationContentsService

router = APIRouter(prefix="/ubicaciones", tags=["Ubicaciones"])


def get_contents_service(db: Session = Depends(get_db)) -> LocationContentsService:
    return LocationContentsService.for_session(db)


@router.get("/{location_id}/contents", response_model=ApiResponse[LocationContents])
async def get_location_contents(
    location_id: str,
    item_type: ContentsFilter = Query(ContentsFilter.ALL, description="repuestos, componentes o all"),
    include_children: bool = Query(True, description="Incluir ubicaciones descendientes"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_limit, ge=1, le=settings.max_page_limit),
    service: LocationContentsService = Depends(get_contents_service)
):
    """
    Todos los items guardados en una ubicación de cualquier nivel

    **Funcionalidad:**
    - Acepta el ID de una ubicación, armario, estantería, estante, cajón, división,
      organizador o cajoncito
    - Con `include_children=true` recorre todo el subárbol
    - Los componentes sólo se buscan en cajoncitos
    """
    contents = await service.get_location_contents(
        location_id,
        item_type=item_type,
        include_children=include_children,
        page=page,
        limit=limit
    )
    return ApiResponse(success=True, data=contents)


@router.get("/{location_id}/descendants", response_model=ApiResponse[LocationDescendants])
async def get_location_descendants(
    location_id: str,
    service: LocationContentsService = Depends(get_contents_service)
):
    """Nodos descendientes (tipo + id) de una ubicación"""
    return ApiResponse(success=True, data=await service.get_location_descendants(location_id))


@router.get("/{location_id}/stats", response_model=ApiResponse[LocationStockStats])
async def get_location_stats(
    location_id: str,
    include_inactive: bool = Query(False),
    include_zero: bool = Query(False),
    service: LocationContentsService = Depends(get_contents_service)
):
    """Unidades por categoría guardadas en la ubicación y sus descendientes"""
    options = StockCalculationOptions(
        include_inactive_items=include_inactive,
        include_zero_quantities=include_zero
    )
    return ApiResponse(success=True, data=await service.get_location_stock_stats(location_id, options))
