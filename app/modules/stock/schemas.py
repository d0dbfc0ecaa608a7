# app/modules/stock/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

from .domain import ItemType, LocationType

class StockSelector(str, Enum):
    """Clases de item a recalcular"""
    REPUESTO = "repuesto"
    COMPONENTE = "componente"
    ALL = "all"

    def includes(self, item_type: ItemType) -> bool:
        return self is StockSelector.ALL or self.value == item_type.value

class StockCalculationOptions(BaseModel):
    """Opciones comunes a todos los cálculos de stock"""
    include_inactive_items: bool = Field(False, description="Permitir items desactivados")
    include_zero_quantities: bool = Field(False, description="Incluir asociaciones con cantidad 0")

# ==================== STOCK DISTRIBUIDO ====================

class LocationStock(BaseModel):
    """Cantidad de un item en un nodo concreto"""
    location_id: str
    location_type: LocationType
    location_name: str
    location_code: str
    quantity: int
    location_path: str = Field(..., description="Ruta de la raíz a la hoja separada por ' > '")

class DistributedStock(BaseModel):
    """Stock total de un item repartido entre ubicaciones"""
    item_id: str
    item_type: ItemType
    item_name: str
    item_code: str
    total_stock: int
    locations: List[LocationStock]
    low_stock_threshold: Optional[int] = None
    is_low_stock: bool

class StockSummary(BaseModel):
    total_repuestos: int = 0
    total_componentes: int = 0
    low_stock_repuestos: int = 0

class StockRecalculation(BaseModel):
    """Resultado del recálculo completo"""
    repuestos: List[DistributedStock] = []
    componentes: List[DistributedStock] = []
    summary: StockSummary = Field(default_factory=StockSummary)

# ==================== LISTADOS PAGINADOS ====================

class StockListSummary(BaseModel):
    total_items: int
    total_pages: int
    current_page: int
    item_type: StockSelector
    filter: str
    total_repuestos: Optional[int] = None
    total_componentes: Optional[int] = None
    low_stock_repuestos: Optional[int] = None

class StockList(BaseModel):
    items: List[DistributedStock]
    summary: StockListSummary
