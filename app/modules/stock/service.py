# app/modules/stock/service.py
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import ItemNotFoundError
from .domain import AssociationStore, ItemStore, ItemType, Placement
from .paths import UNKNOWN_LOCATION, build_location_path
from .repository import StockRepository
from .schemas import (
    DistributedStock, LocationStock, StockCalculationOptions, StockRecalculation,
    StockSelector, StockSummary
)

logger = logging.getLogger(__name__)


def location_stock_from(placement: Placement) -> LocationStock:
    """Entrada de desglose; un nodo inexistente se muestra como "Unknown" sin id ni código"""
    node = placement.node
    return LocationStock(
        location_id=node.id if node else "",
        location_type=placement.anchor.location_type,
        location_name=node.nombre if node else UNKNOWN_LOCATION,
        location_code=node.codigo if node else "",
        quantity=placement.cantidad,
        location_path=build_location_path(placement)
    )


@dataclass(frozen=True)
class StockOutcome:
    """Resultado individual dentro de un cálculo por lotes: stock o error"""
    item_id: str
    stock: Optional[DistributedStock] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StockCalculator:
    """
    Cálculo de stock distribuido en tiempo real.

    El stock total de un item nunca se guarda: se obtiene sumando sus
    asociaciones de ubicación en cada consulta. Los resultados son
    instantáneas sin bloqueo; escrituras concurrentes sobre las asociaciones
    pueden reflejarse a medias.
    """

    def __init__(
        self,
        items: ItemStore,
        associations: AssociationStore,
        timeout_seconds: Optional[float] = None
    ):
        self.items = items
        self.associations = associations
        self.timeout_seconds = timeout_seconds

    @classmethod
    def for_session(cls, db: Session) -> "StockCalculator":
        repository = StockRepository(db)
        return cls(repository, repository, timeout_seconds=settings.stock_timeout_seconds)

    # ==================== ITEM INDIVIDUAL ====================

    async def calculate_repuesto_stock(
        self,
        repuesto_id: str,
        options: Optional[StockCalculationOptions] = None
    ) -> DistributedStock:
        """Stock total de un repuesto en todas sus ubicaciones"""
        options = options or StockCalculationOptions()

        repuesto = await self.items.find_repuesto(repuesto_id, options.include_inactive_items)
        if not repuesto:
            raise ItemNotFoundError("Repuesto", repuesto_id)

        placements = await self.associations.find_associations_for_repuesto(repuesto_id)
        locations = self._build_breakdown(placements, options)
        total_stock = sum(location.quantity for location in locations)

        # Inclusivo: un repuesto justo en el mínimo ya está en stock bajo
        is_low_stock = total_stock <= repuesto.stock_minimo if repuesto.stock_minimo else False

        return DistributedStock(
            item_id=repuesto.id,
            item_type=ItemType.REPUESTO,
            item_name=repuesto.nombre,
            item_code=repuesto.codigo,
            total_stock=total_stock,
            locations=locations,
            low_stock_threshold=repuesto.stock_minimo,
            is_low_stock=is_low_stock
        )

    async def calculate_componente_stock(
        self,
        componente_id: str,
        options: Optional[StockCalculationOptions] = None
    ) -> DistributedStock:
        """Stock total de un componente; sólo se guardan en cajoncitos y no tienen mínimo"""
        options = options or StockCalculationOptions()

        componente = await self.items.find_componente(componente_id, options.include_inactive_items)
        if not componente:
            raise ItemNotFoundError("Componente", componente_id)

        placements = await self.associations.find_associations_for_componente(componente_id)
        locations = self._build_breakdown(placements, options)

        return DistributedStock(
            item_id=componente.id,
            item_type=ItemType.COMPONENTE,
            item_name=componente.nombre,
            item_code=componente.codigo,
            total_stock=sum(location.quantity for location in locations),
            locations=locations,
            is_low_stock=False
        )

    async def calculate_stock(
        self,
        item_type: ItemType,
        item_id: str,
        options: Optional[StockCalculationOptions] = None
    ) -> DistributedStock:
        if item_type == ItemType.REPUESTO:
            return await self.calculate_repuesto_stock(item_id, options)
        return await self.calculate_componente_stock(item_id, options)

    def _build_breakdown(
        self,
        placements: List[Placement],
        options: StockCalculationOptions
    ) -> List[LocationStock]:
        return [
            location_stock_from(placement)
            for placement in placements
            if options.include_zero_quantities or placement.cantidad > 0
        ]

    # ==================== LOTES ====================

    async def get_distributed_stock(
        self,
        item_ids: List[str],
        item_type: ItemType,
        options: Optional[StockCalculationOptions] = None
    ) -> List[DistributedStock]:
        """
        Stock de varios items de la misma clase.

        Política best-effort: un item que falla (no encontrado, error de
        almacén) se registra en el log y se omite; nunca aborta el lote.
        """
        outcomes = await self._with_deadline(self._collect_outcomes(item_ids, item_type, options))
        return [outcome.stock for outcome in outcomes if outcome.ok]

    async def _collect_outcomes(
        self,
        item_ids: List[str],
        item_type: ItemType,
        options: Optional[StockCalculationOptions]
    ) -> List[StockOutcome]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds if self.timeout_seconds is not None else None

        outcomes: List[StockOutcome] = []
        for item_id in item_ids:
            # Las consultas de la sesión síncrona no ceden el control: el plazo se comprueba entre items
            if deadline is not None and loop.time() >= deadline:
                logger.warning(
                    f"⏱️ Plazo de {self.timeout_seconds}s agotado calculando stock de {item_type.value} "
                    f"({len(outcomes)}/{len(item_ids)} items procesados)"
                )
                raise asyncio.TimeoutError(f"Plazo de {self.timeout_seconds}s agotado")
            try:
                stock = await self.calculate_stock(item_type, item_id, options)
                outcomes.append(StockOutcome(item_id=item_id, stock=stock))
            except Exception as e:
                logger.error(f"❌ Error calculando stock de {item_type.value} {item_id}: {e}")
                outcomes.append(StockOutcome(item_id=item_id, error=e))
        return outcomes

    async def _with_deadline(self, coro):
        """Corta también un almacén asíncrono que se queda esperando dentro de un item"""
        if self.timeout_seconds is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=self.timeout_seconds)

    # ==================== STOCK BAJO ====================

    async def get_low_stock_items(
        self,
        options: Optional[StockCalculationOptions] = None
    ) -> List[DistributedStock]:
        """Repuestos con umbral configurado cuyo total está en o por debajo del mínimo"""
        options = options or StockCalculationOptions()

        repuesto_ids = await self.items.list_repuestos_with_threshold(options.include_inactive_items)
        stocks = await self.get_distributed_stock(repuesto_ids, ItemType.REPUESTO, options)
        return [stock for stock in stocks if stock.is_low_stock]

    # ==================== RECÁLCULO COMPLETO ====================

    async def recalculate_all_stock(
        self,
        selector: StockSelector = StockSelector.ALL,
        options: Optional[StockCalculationOptions] = None
    ) -> StockRecalculation:
        """Recalcula el stock de todos los items (comprobación de integridad)"""
        options = options or StockCalculationOptions()
        result = StockRecalculation()

        if selector.includes(ItemType.REPUESTO):
            repuesto_ids = await self.items.list_repuesto_ids(options.include_inactive_items)
            result.repuestos = await self.get_distributed_stock(repuesto_ids, ItemType.REPUESTO, options)

        if selector.includes(ItemType.COMPONENTE):
            componente_ids = await self.items.list_componente_ids(options.include_inactive_items)
            result.componentes = await self.get_distributed_stock(componente_ids, ItemType.COMPONENTE, options)

        result.summary = StockSummary(
            total_repuestos=len(result.repuestos),
            total_componentes=len(result.componentes),
            low_stock_repuestos=sum(1 for stock in result.repuestos if stock.is_low_stock)
        )

        logger.info(
            f"Recálculo de stock ({selector.value}): {result.summary.total_repuestos} repuestos, "
            f"{result.summary.total_componentes} componentes, "
            f"{result.summary.low_stock_repuestos} en stock bajo"
        )
        return result
