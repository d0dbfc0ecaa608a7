# app/modules/stock/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.shared.pagination import paginate
from app.shared.schemas import ApiResponse
from .domain import ItemType
from .schemas import (
    DistributedStock, StockCalculationOptions, StockList, StockListSummary,
    StockRecalculation, StockSelector
)
from .service import StockCalculator

router = APIRouter(prefix="/stock", tags=["Stock"])


def get_stock_calculator(db: Session = Depends(get_db)) -> StockCalculator:
    return StockCalculator.for_session(db)


@router.get("", response_model=ApiResponse[StockList])
async def get_stock(
    item_type: StockSelector = Query(StockSelector.ALL, description="repuesto, componente o all"),
    low_stock: bool = Query(False, description="Sólo repuestos en stock bajo"),
    include_inactive: bool = Query(False, description="Incluir items desactivados"),
    include_zero: bool = Query(False, description="Incluir asociaciones con cantidad 0"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_limit, ge=1, le=settings.max_page_limit),
    calculator: StockCalculator = Depends(get_stock_calculator)
):
    """
    Stock distribuido de todos los items

    **Modos:**
    - `low_stock=true`: sólo repuestos con total en o por debajo de su stock mínimo
    - por defecto: recálculo de la clase pedida (`item_type`)
    """
    options = StockCalculationOptions(
        include_inactive_items=include_inactive,
        include_zero_quantities=include_zero
    )

    if low_stock:
        low_stock_items = await calculator.get_low_stock_items(options)
        items, total_pages = paginate(low_stock_items, page, limit)
        summary = StockListSummary(
            total_items=len(low_stock_items),
            total_pages=total_pages,
            current_page=page,
            item_type=StockSelector.REPUESTO,
            filter="low-stock"
        )
    else:
        stock_data = await calculator.recalculate_all_stock(item_type, options)
        all_items = [*stock_data.repuestos, *stock_data.componentes]
        items, total_pages = paginate(all_items, page, limit)
        summary = StockListSummary(
            total_items=len(all_items),
            total_pages=total_pages,
            current_page=page,
            item_type=item_type,
            filter="all",
            total_repuestos=stock_data.summary.total_repuestos,
            total_componentes=stock_data.summary.total_componentes,
            low_stock_repuestos=stock_data.summary.low_stock_repuestos
        )

    return ApiResponse(success=True, data=StockList(items=items, summary=summary))


@router.get("/recalculate", response_model=ApiResponse[StockRecalculation])
async def recalculate_stock(
    item_type: StockSelector = Query(StockSelector.ALL, description="repuesto, componente o all"),
    include_inactive: bool = Query(False),
    include_zero: bool = Query(False),
    calculator: StockCalculator = Depends(get_stock_calculator)
):
    """
    Recalcula el stock de todos los items (comprobación de integridad de datos)
    """
    options = StockCalculationOptions(
        include_inactive_items=include_inactive,
        include_zero_quantities=include_zero
    )
    result = await calculator.recalculate_all_stock(item_type, options)
    return ApiResponse(success=True, data=result)


@router.get("/{item_type}/{item_id}", response_model=ApiResponse[DistributedStock])
async def get_item_stock(
    item_type: ItemType,
    item_id: str,
    include_inactive: bool = Query(False),
    include_zero: bool = Query(False),
    calculator: StockCalculator = Depends(get_stock_calculator)
):
    """
    Stock de un repuesto o componente concreto con desglose por ubicación

    Responde 404 si el item no existe (o está desactivado y no se pidió `include_inactive`).
    """
    options = StockCalculationOptions(
        include_inactive_items=include_inactive,
        include_zero_quantities=include_zero
    )
    stock = await calculator.calculate_stock(item_type, item_id, options)
    return ApiResponse(success=True, data=stock)
