# app/modules/locations/schemas.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum

from app.modules.stock.domain import ItemType, LocationType
from app.modules.stock.schemas import LocationStock

class ContentsFilter(str, Enum):
    """Clases de item a listar en una ubicación"""
    REPUESTOS = "repuestos"
    COMPONENTES = "componentes"
    ALL = "all"

    @property
    def wants_repuestos(self) -> bool:
        return self in (ContentsFilter.REPUESTOS, ContentsFilter.ALL)

    @property
    def wants_componentes(self) -> bool:
        return self in (ContentsFilter.COMPONENTES, ContentsFilter.ALL)

# ==================== JERARQUÍA ====================

class DescendantNode(BaseModel):
    location_id: str
    location_type: LocationType

class LocationDescendants(BaseModel):
    location_id: str
    location_type: LocationType
    descendants: List[DescendantNode]
    total: int

# ==================== CONTENIDO DE UBICACIÓN ====================

class ContentItem(BaseModel):
    """Una asociación item → nodo encontrada bajo la ubicación consultada"""
    item_type: ItemType
    association_id: str
    item_id: str
    item_name: str
    item_code: str
    categoria: Optional[str] = None
    quantity: int
    location: LocationStock
    created_at: Optional[datetime] = None

class ContentsSummary(BaseModel):
    total_items: int = Field(..., description="Número de asociaciones encontradas")
    repuestos_count: int = Field(..., description="Unidades de repuestos")
    componentes_count: int = Field(..., description="Unidades de componentes")
    total_pages: int
    current_page: int

class LocationContents(BaseModel):
    location_id: str
    location_type: LocationType
    item_type: ContentsFilter
    include_children: bool
    items: List[ContentItem]
    summary: ContentsSummary

# ==================== ESTADÍSTICAS ====================

class LocationStockStats(BaseModel):
    """Unidades guardadas en una ubicación (y sus descendientes) por categoría"""
    location_id: str
    location_type: LocationType
    total_items: int
    total_repuestos: int
    total_componentes: int
    repuesto_types: Dict[str, int]
    componente_types: Dict[str, int]
