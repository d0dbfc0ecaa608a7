# app/modules/stock/repository.py
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_, asc

from app.core.exceptions import DataIntegrityError
from app.shared.database.models import (
    Repuesto, Componente, RepuestoUbicacion, ComponenteUbicacion,
    Armario, Estanteria, Estante, Cajon, Division, Organizador, Cajoncito
)
from .domain import (
    AnchorRef, ItemInfo, ItemPlacement, ItemType, LocationNode, LocationType,
    Placement, REPUESTO_ANCHOR_TYPES
)

# Cadenas de ancestros que se cargan junto con cada asociación para construir la ruta
_REPUESTO_PLACEMENT_LOADS = (
    joinedload(RepuestoUbicacion.armario).joinedload(Armario.ubicacion),
    joinedload(RepuestoUbicacion.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(RepuestoUbicacion.estante).joinedload(Estante.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(RepuestoUbicacion.cajon).joinedload(Cajon.armario).joinedload(Armario.ubicacion),
    joinedload(RepuestoUbicacion.cajon).joinedload(Cajon.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(RepuestoUbicacion.division).joinedload(Division.cajon)
        .joinedload(Cajon.armario).joinedload(Armario.ubicacion),
    joinedload(RepuestoUbicacion.division).joinedload(Division.cajon)
        .joinedload(Cajon.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(RepuestoUbicacion.cajoncito).joinedload(Cajoncito.organizador)
        .joinedload(Organizador.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(RepuestoUbicacion.cajoncito).joinedload(Cajoncito.organizador)
        .joinedload(Organizador.armario).joinedload(Armario.ubicacion),
)

_COMPONENTE_PLACEMENT_LOADS = (
    joinedload(ComponenteUbicacion.cajoncito).joinedload(Cajoncito.organizador)
        .joinedload(Organizador.estanteria).joinedload(Estanteria.ubicacion),
    joinedload(ComponenteUbicacion.cajoncito).joinedload(Cajoncito.organizador)
        .joinedload(Organizador.armario).joinedload(Armario.ubicacion),
)

# ==================== CONVERSIÓN ORM → DOMINIO ====================

def to_location_node(orm_node) -> LocationNode:
    return LocationNode(
        id=orm_node.id,
        location_type=LocationType(orm_node.node_type),
        nombre=orm_node.nombre,
        codigo=orm_node.codigo or ""
    )


def resolve_ancestors(orm_node) -> Tuple[List[LocationNode], bool]:
    """Sube por los padres hasta la ubicación raíz; devuelve (raíz→padre, completa)"""
    chain: List[LocationNode] = []
    current = orm_node
    while current.node_type != LocationType.UBICACION.value:
        parent = current.parent_node
        if parent is None:
            chain.reverse()
            return chain, False
        chain.append(to_location_node(parent))
        current = parent
    chain.reverse()
    return chain, True


def repuesto_anchor(row: RepuestoUbicacion) -> AnchorRef:
    present = [
        AnchorRef(location_type, getattr(row, f"{location_type.value}_id"))
        for location_type in REPUESTO_ANCHOR_TYPES
        if getattr(row, f"{location_type.value}_id")
    ]
    if len(present) != 1:
        raise DataIntegrityError(
            f"La asociación {row.id} debe apuntar exactamente a una ubicación (tiene {len(present)})"
        )
    return present[0]


def to_placement(row, item_id: str, anchor: AnchorRef) -> Placement:
    orm_node = getattr(row, anchor.location_type.value)
    if orm_node is None:
        return Placement(
            id=row.id, item_id=item_id, cantidad=row.cantidad, anchor=anchor,
            node=None, ancestors=(), chain_complete=False, created_at=row.created_at
        )
    ancestors, complete = resolve_ancestors(orm_node)
    return Placement(
        id=row.id,
        item_id=item_id,
        cantidad=row.cantidad,
        anchor=anchor,
        node=to_location_node(orm_node),
        ancestors=tuple(ancestors),
        chain_complete=complete,
        created_at=row.created_at
    )


def repuesto_info(repuesto: Repuesto) -> ItemInfo:
    return ItemInfo(
        id=repuesto.id,
        item_type=ItemType.REPUESTO,
        nombre=repuesto.nombre,
        codigo=repuesto.codigo,
        categoria=repuesto.categoria,
        stock_minimo=repuesto.stock_minimo
    )


def componente_info(componente: Componente) -> ItemInfo:
    # Los componentes no tienen código propio: se sintetiza con la categoría
    return ItemInfo(
        id=componente.id,
        item_type=ItemType.COMPONENTE,
        nombre=componente.descripcion,
        codigo=f"{componente.categoria}-{componente.id}",
        categoria=componente.categoria
    )


class StockRepository:
    """
    Acceso a datos de items y asociaciones para el cálculo de stock.

    Los métodos son corrutinas para cumplir los contratos de `domain.py`;
    internamente usan la sesión síncrona de la petición.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== ITEMS ====================

    async def find_repuesto(self, repuesto_id: str, include_inactive: bool = False) -> Optional[ItemInfo]:
        query = self.db.query(Repuesto).filter(Repuesto.id == repuesto_id)
        if not include_inactive:
            query = query.filter(Repuesto.is_active == True)
        repuesto = query.first()
        return repuesto_info(repuesto) if repuesto else None

    async def find_componente(self, componente_id: str, include_inactive: bool = False) -> Optional[ItemInfo]:
        query = self.db.query(Componente).filter(Componente.id == componente_id)
        if not include_inactive:
            query = query.filter(Componente.is_active == True)
        componente = query.first()
        return componente_info(componente) if componente else None

    async def list_repuestos_with_threshold(self, include_inactive: bool = False) -> List[str]:
        """IDs de repuestos con stock mínimo configurado (> 0)"""
        query = self.db.query(Repuesto.id).filter(Repuesto.stock_minimo > 0)
        if not include_inactive:
            query = query.filter(Repuesto.is_active == True)
        return [row.id for row in query.order_by(asc(Repuesto.created_at), asc(Repuesto.id)).all()]

    async def list_repuesto_ids(self, include_inactive: bool = False) -> List[str]:
        query = self.db.query(Repuesto.id)
        if not include_inactive:
            query = query.filter(Repuesto.is_active == True)
        return [row.id for row in query.order_by(asc(Repuesto.created_at), asc(Repuesto.id)).all()]

    async def list_componente_ids(self, include_inactive: bool = False) -> List[str]:
        query = self.db.query(Componente.id)
        if not include_inactive:
            query = query.filter(Componente.is_active == True)
        return [row.id for row in query.order_by(asc(Componente.created_at), asc(Componente.id)).all()]

    # ==================== ASOCIACIONES POR ITEM ====================

    async def find_associations_for_repuesto(self, repuesto_id: str) -> List[Placement]:
        rows = self.db.query(RepuestoUbicacion)\
            .options(*_REPUESTO_PLACEMENT_LOADS)\
            .filter(RepuestoUbicacion.repuesto_id == repuesto_id)\
            .order_by(asc(RepuestoUbicacion.created_at))\
            .all()
        return [to_placement(row, repuesto_id, repuesto_anchor(row)) for row in rows]

    async def find_associations_for_componente(self, componente_id: str) -> List[Placement]:
        rows = self.db.query(ComponenteUbicacion)\
            .options(*_COMPONENTE_PLACEMENT_LOADS)\
            .filter(ComponenteUbicacion.componente_id == componente_id)\
            .order_by(asc(ComponenteUbicacion.created_at))\
            .all()
        return [
            to_placement(row, componente_id, AnchorRef(LocationType.CAJONCITO, row.cajoncito_id))
            for row in rows
        ]

    # ==================== ASOCIACIONES POR UBICACIÓN ====================

    async def find_repuesto_placements_at(
        self,
        ids_by_type: Dict[LocationType, List[str]],
        include_inactive: bool = False
    ) -> List[ItemPlacement]:
        """Asociaciones de repuestos ancladas en cualquiera de los nodos indicados"""
        conditions = [
            getattr(RepuestoUbicacion, f"{location_type.value}_id").in_(ids_by_type[location_type])
            for location_type in REPUESTO_ANCHOR_TYPES
            if ids_by_type.get(location_type)
        ]
        if not conditions:
            return []

        query = self.db.query(RepuestoUbicacion)\
            .join(Repuesto, RepuestoUbicacion.repuesto_id == Repuesto.id)\
            .options(joinedload(RepuestoUbicacion.repuesto), *_REPUESTO_PLACEMENT_LOADS)\
            .filter(or_(*conditions))
        if not include_inactive:
            query = query.filter(Repuesto.is_active == True)

        rows = query.order_by(asc(RepuestoUbicacion.created_at)).all()
        return [
            ItemPlacement(
                item=repuesto_info(row.repuesto),
                placement=to_placement(row, row.repuesto_id, repuesto_anchor(row))
            )
            for row in rows
        ]

    async def find_componente_placements_at(
        self,
        cajoncito_ids: List[str],
        include_inactive: bool = False
    ) -> List[ItemPlacement]:
        """Asociaciones de componentes en los cajoncitos indicados"""
        if not cajoncito_ids:
            return []

        query = self.db.query(ComponenteUbicacion)\
            .join(Componente, ComponenteUbicacion.componente_id == Componente.id)\
            .options(joinedload(ComponenteUbicacion.componente), *_COMPONENTE_PLACEMENT_LOADS)\
            .filter(ComponenteUbicacion.cajoncito_id.in_(cajoncito_ids))
        if not include_inactive:
            query = query.filter(Componente.is_active == True)

        rows = query.order_by(asc(ComponenteUbicacion.created_at)).all()
        return [
            ItemPlacement(
                item=componente_info(row.componente),
                placement=to_placement(
                    row, row.componente_id, AnchorRef(LocationType.CAJONCITO, row.cajoncito_id)
                )
            )
            for row in rows
        ]
