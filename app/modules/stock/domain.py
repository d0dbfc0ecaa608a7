# app/modules/stock/domain.py
"""
Tipos de dominio del motor de stock distribuido y contratos de los
colaboradores de persistencia.

Los servicios (StockCalculator, LocationHierarchyResolver,
LocationContentsService) dependen de estos protocolos y no de SQLAlchemy,
de modo que los tests pueden sustituir los almacenes por fakes en memoria.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence


class LocationType(str, Enum):
    """Tipos de nodo del árbol de almacenamiento"""
    UBICACION = "ubicacion"
    ARMARIO = "armario"
    ESTANTERIA = "estanteria"
    ESTANTE = "estante"
    CAJON = "cajon"
    DIVISION = "division"
    ORGANIZADOR = "organizador"
    CAJONCITO = "cajoncito"


class ItemType(str, Enum):
    """Clases de item con stock distribuido"""
    REPUESTO = "repuesto"
    COMPONENTE = "componente"


# Orden fijo de sondeo para resolver el tipo de un ID: gana la primera coincidencia
LOCATION_PROBE_ORDER = (
    LocationType.UBICACION,
    LocationType.ARMARIO,
    LocationType.ESTANTERIA,
    LocationType.ESTANTE,
    LocationType.CAJON,
    LocationType.DIVISION,
    LocationType.ORGANIZADOR,
    LocationType.CAJONCITO,
)

# Tipos en los que puede anclarse una asociación de repuesto
REPUESTO_ANCHOR_TYPES = (
    LocationType.ARMARIO,
    LocationType.ESTANTERIA,
    LocationType.ESTANTE,
    LocationType.CAJON,
    LocationType.DIVISION,
    LocationType.CAJONCITO,
)


@dataclass(frozen=True)
class AnchorRef:
    """Referencia a un nodo concreto: tipo + id"""
    location_type: LocationType
    location_id: str


@dataclass(frozen=True)
class LocationNode:
    id: str
    location_type: LocationType
    nombre: str
    codigo: str


@dataclass(frozen=True)
class Placement:
    """
    Asociación item → nodo con su cantidad.

    `node` es None cuando el registro del nodo de anclaje no existe.
    `ancestors` va de la raíz al padre inmediato; si algún enlace falta la
    cadena se corta ahí y `chain_complete` es False.
    """
    id: str
    item_id: str
    cantidad: int
    anchor: AnchorRef
    node: Optional[LocationNode] = None
    ancestors: Sequence[LocationNode] = field(default_factory=tuple)
    chain_complete: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ItemInfo:
    id: str
    item_type: ItemType
    nombre: str
    codigo: str
    categoria: Optional[str] = None
    stock_minimo: Optional[int] = None


@dataclass(frozen=True)
class ItemPlacement:
    """Asociación junto con los datos del item, usada por las consultas por ubicación"""
    item: ItemInfo
    placement: Placement


# ==================== CONTRATOS DE PERSISTENCIA ====================

class ItemStore(Protocol):
    async def find_repuesto(self, repuesto_id: str, include_inactive: bool = False) -> Optional[ItemInfo]: ...
    async def find_componente(self, componente_id: str, include_inactive: bool = False) -> Optional[ItemInfo]: ...
    async def list_repuestos_with_threshold(self, include_inactive: bool = False) -> List[str]: ...
    async def list_repuesto_ids(self, include_inactive: bool = False) -> List[str]: ...
    async def list_componente_ids(self, include_inactive: bool = False) -> List[str]: ...


class AssociationStore(Protocol):
    async def find_associations_for_repuesto(self, repuesto_id: str) -> List[Placement]: ...
    async def find_associations_for_componente(self, componente_id: str) -> List[Placement]: ...
    async def find_repuesto_placements_at(
        self, ids_by_type: Dict[LocationType, List[str]], include_inactive: bool = False
    ) -> List[ItemPlacement]: ...
    async def find_componente_placements_at(
        self, cajoncito_ids: List[str], include_inactive: bool = False
    ) -> List[ItemPlacement]: ...


class NodeChildrenStore(Protocol):
    async def find_children(self, parent_type: LocationType, parent_id: str, child_type: LocationType) -> List[str]: ...


class NodeProbe(Protocol):
    async def find_by_id(self, location_type: LocationType, location_id: str) -> Optional[str]: ...
