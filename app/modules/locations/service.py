# app/modules/locations/service.py
import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import LocationNotFoundError
from app.modules.stock.domain import (
    AnchorRef, AssociationStore, ItemPlacement, LocationType, NodeChildrenStore,
    NodeProbe, LOCATION_PROBE_ORDER
)
from app.modules.stock.repository import StockRepository
from app.modules.stock.schemas import StockCalculationOptions
from app.modules.stock.service import location_stock_from
from app.shared.pagination import paginate
from .repository import LocationRepository
from .schemas import (
    ContentItem, ContentsFilter, ContentsSummary, DescendantNode, LocationContents,
    LocationDescendants, LocationStockStats
)

logger = logging.getLogger(__name__)

# Relaciones padre → hijos del árbol de almacenamiento.
# El estante no tiene hijos: los cajones cuelgan de la estantería, no del estante.
CHILD_TYPES: Dict[LocationType, tuple] = {
    LocationType.UBICACION: (LocationType.ARMARIO, LocationType.ESTANTERIA),
    LocationType.ARMARIO: (LocationType.CAJON,),
    LocationType.ESTANTERIA: (LocationType.ESTANTE, LocationType.ORGANIZADOR),
    LocationType.ESTANTE: (),
    LocationType.CAJON: (LocationType.DIVISION,),
    LocationType.DIVISION: (),
    LocationType.ORGANIZADOR: (LocationType.CAJONCITO,),
    LocationType.CAJONCITO: (),
}

SIN_CATEGORIA = "Sin categoría"


class LocationHierarchyResolver:
    """Enumera todos los nodos descendientes de un nodo, a cualquier profundidad"""

    def __init__(self, children: NodeChildrenStore):
        self.children = children

    async def resolve_descendants(self, node_id: str, node_type: LocationType) -> List[AnchorRef]:
        """
        Descendientes tipados de `node_id` (sin incluirlo). Las colecciones
        hermanas independientes se piden a la vez; los errores del almacén
        se propagan sin capturar.
        """
        child_types = CHILD_TYPES[node_type]
        if not child_types:
            return []

        child_groups = await asyncio.gather(*(
            self.children.find_children(node_type, node_id, child_type)
            for child_type in child_types
        ))

        descendants: List[AnchorRef] = []
        for child_type, child_ids in zip(child_types, child_groups):
            for child_id in child_ids:
                descendants.append(AnchorRef(child_type, child_id))
                descendants.extend(await self.resolve_descendants(child_id, child_type))
        return descendants

    async def get_all_child_location_ids(self, node_id: str, node_type: LocationType) -> List[str]:
        return [ref.location_id for ref in await self.resolve_descendants(node_id, node_type)]


class LocationContentsService:
    """
    Contenido de una ubicación: todo lo guardado en el nodo y, si se pide,
    en sus descendientes.
    """

    def __init__(
        self,
        probe: NodeProbe,
        children: NodeChildrenStore,
        associations: AssociationStore
    ):
        self.probe = probe
        self.associations = associations
        self.resolver = LocationHierarchyResolver(children)

    @classmethod
    def for_session(cls, db: Session) -> "LocationContentsService":
        locations = LocationRepository(db)
        return cls(locations, locations, StockRepository(db))

    async def resolve_location_type(self, location_id: str) -> LocationType:
        """Los IDs no indican su tipo: se sondea cada tabla en orden fijo y gana la primera"""
        for location_type in LOCATION_PROBE_ORDER:
            if await self.probe.find_by_id(location_type, location_id):
                return location_type
        raise LocationNotFoundError(location_id)

    async def get_location_descendants(self, location_id: str) -> LocationDescendants:
        location_type = await self.resolve_location_type(location_id)
        descendants = await self.resolver.resolve_descendants(location_id, location_type)
        return LocationDescendants(
            location_id=location_id,
            location_type=location_type,
            descendants=[
                DescendantNode(location_id=ref.location_id, location_type=ref.location_type)
                for ref in descendants
            ],
            total=len(descendants)
        )

    async def _location_scope(
        self,
        location_id: str,
        location_type: LocationType,
        include_children: bool
    ) -> Dict[LocationType, List[str]]:
        """IDs del nodo (y descendientes) agrupados por tipo"""
        refs = [AnchorRef(location_type, location_id)]
        if include_children:
            refs.extend(await self.resolver.resolve_descendants(location_id, location_type))
        logger.debug(f"{location_type.value} {location_id}: {len(refs)} nodos en el alcance")

        ids_by_type: Dict[LocationType, List[str]] = defaultdict(list)
        for ref in refs:
            ids_by_type[ref.location_type].append(ref.location_id)
        return dict(ids_by_type)

    async def _placements_in_scope(
        self,
        ids_by_type: Dict[LocationType, List[str]],
        item_filter: ContentsFilter,
        include_inactive: bool = False
    ):
        repuestos: List[ItemPlacement] = []
        componentes: List[ItemPlacement] = []

        if item_filter.wants_repuestos:
            repuestos = await self.associations.find_repuesto_placements_at(ids_by_type, include_inactive)

        if item_filter.wants_componentes:
            componentes = await self.associations.find_componente_placements_at(
                ids_by_type.get(LocationType.CAJONCITO, []), include_inactive
            )

        return repuestos, componentes

    async def get_location_contents(
        self,
        location_id: str,
        item_type: ContentsFilter = ContentsFilter.ALL,
        include_children: bool = True,
        page: int = 1,
        limit: int = 50
    ) -> LocationContents:
        """Items guardados en la ubicación, repuestos primero y luego componentes, paginados"""
        location_type = await self.resolve_location_type(location_id)
        ids_by_type = await self._location_scope(location_id, location_type, include_children)
        repuestos, componentes = await self._placements_in_scope(ids_by_type, item_type)

        all_items = [self._content_item(entry) for entry in [*repuestos, *componentes]]
        items, total_pages = paginate(all_items, page, limit)

        return LocationContents(
            location_id=location_id,
            location_type=location_type,
            item_type=item_type,
            include_children=include_children,
            items=items,
            summary=ContentsSummary(
                total_items=len(all_items),
                repuestos_count=sum(entry.placement.cantidad for entry in repuestos),
                componentes_count=sum(entry.placement.cantidad for entry in componentes),
                total_pages=total_pages,
                current_page=page
            )
        )

    @staticmethod
    def _content_item(entry: ItemPlacement) -> ContentItem:
        return ContentItem(
            item_type=entry.item.item_type,
            association_id=entry.placement.id,
            item_id=entry.item.id,
            item_name=entry.item.nombre,
            item_code=entry.item.codigo,
            categoria=entry.item.categoria,
            quantity=entry.placement.cantidad,
            location=location_stock_from(entry.placement),
            created_at=entry.placement.created_at
        )

    async def get_location_stock_stats(
        self,
        location_id: str,
        options: Optional[StockCalculationOptions] = None
    ) -> LocationStockStats:
        """Unidades por categoría en la ubicación y todos sus descendientes"""
        options = options or StockCalculationOptions()
        location_type = await self.resolve_location_type(location_id)
        ids_by_type = await self._location_scope(location_id, location_type, include_children=True)
        repuestos, componentes = await self._placements_in_scope(
            ids_by_type, ContentsFilter.ALL, options.include_inactive_items
        )

        repuesto_types = self._units_by_category(repuestos, options)
        componente_types = self._units_by_category(componentes, options)
        total_repuestos = sum(repuesto_types.values())
        total_componentes = sum(componente_types.values())

        return LocationStockStats(
            location_id=location_id,
            location_type=location_type,
            total_items=total_repuestos + total_componentes,
            total_repuestos=total_repuestos,
            total_componentes=total_componentes,
            repuesto_types=repuesto_types,
            componente_types=componente_types
        )

    @staticmethod
    def _units_by_category(entries: List[ItemPlacement], options: StockCalculationOptions) -> Dict[str, int]:
        units: Dict[str, int] = {}
        for entry in entries:
            if not options.include_zero_quantities and entry.placement.cantidad <= 0:
                continue
            category = entry.item.categoria or SIN_CATEGORIA
            units[category] = units.get(category, 0) + entry.placement.cantidad
        return units
