"""
Tests del repositorio de stock y del cálculo completo sobre SQLite con el
escenario de demostración
"""
import asyncio

import pytest

from app.core.exceptions import DataIntegrityError, ItemNotFoundError
from app.modules.locations.repository import LocationRepository
from app.modules.stock.domain import LocationType
from app.modules.stock.repository import StockRepository, repuesto_anchor
from app.modules.stock.schemas import StockCalculationOptions
from app.modules.stock.service import StockCalculator
from app.shared.database.models import Armario, RepuestoUbicacion


class TestStockRepository:

    def test_associations_carry_full_chain(self, db, seeded):
        placements = asyncio.run(StockRepository(db).find_associations_for_repuesto("rep-1"))

        assert [p.id for p in placements] == ["ru-1", "ru-2"]
        cajoncito = placements[1]
        assert cajoncito.chain_complete is True
        assert [node.nombre for node in cajoncito.ancestors] == [
            "Almacén Central", "Armario Principal", "Organizador de componentes"
        ]

    def test_item_lists_skip_inactive(self, db, seeded):
        repository = StockRepository(db)

        assert asyncio.run(repository.list_repuesto_ids()) == ["rep-1", "rep-2", "rep-3"]
        assert asyncio.run(repository.list_repuesto_ids(include_inactive=True)) == \
            ["rep-1", "rep-2", "rep-3", "rep-4"]
        assert asyncio.run(repository.list_repuestos_with_threshold()) == ["rep-1", "rep-2"]
        assert asyncio.run(repository.list_componente_ids()) == ["comp-1", "comp-2"]

    def test_componente_info_synthesizes_code(self, db, seeded):
        componente = asyncio.run(StockRepository(db).find_componente("comp-1"))

        assert componente.codigo == "RESISTENCIA-comp-1"
        assert componente.nombre == "Resistencia carbón 1KΩ 1/4W 5%"

    def test_anchor_must_be_unique(self):
        row = RepuestoUbicacion(id="ru-x", repuesto_id="rep-1", armario_id="arm-1", cajon_id="cjn-1", cantidad=1)
        with pytest.raises(DataIntegrityError, match="ru-x"):
            repuesto_anchor(row)

    def test_anchor_must_exist(self):
        row = RepuestoUbicacion(id="ru-y", repuesto_id="rep-1", cantidad=1)
        with pytest.raises(DataIntegrityError):
            repuesto_anchor(row)


class TestLocationRepository:

    def test_children_of_each_kind(self, db, seeded):
        repository = LocationRepository(db)

        assert asyncio.run(repository.find_children(
            LocationType.UBICACION, "ubic-1", LocationType.ARMARIO
        )) == ["arm-1"]
        assert asyncio.run(repository.find_children(
            LocationType.ESTANTERIA, "esta-1", LocationType.ORGANIZADOR
        )) == ["org-2"]
        assert asyncio.run(repository.find_children(
            LocationType.UBICACION, "ubic-2", LocationType.ESTANTERIA
        )) == []

    def test_unrelated_types_rejected(self, db):
        with pytest.raises(ValueError):
            asyncio.run(LocationRepository(db).find_children(
                LocationType.ESTANTE, "ste-1", LocationType.CAJON
            ))

    def test_find_by_id_is_typed(self, db, seeded):
        repository = LocationRepository(db)

        assert asyncio.run(repository.find_by_id(LocationType.CAJONCITO, "cjt-1")) == "cjt-1"
        assert asyncio.run(repository.find_by_id(LocationType.ARMARIO, "cjt-1")) is None


class TestStockOverDatabase:

    def test_fusible_example(self, db, seeded):
        stock = asyncio.run(StockCalculator.for_session(db).calculate_repuesto_stock("rep-1"))

        assert stock.total_stock == 20
        assert stock.is_low_stock is False
        assert [location.location_path for location in stock.locations] == [
            "Almacén Central > Armario Principal",
            "Almacén Central > Armario Principal > Organizador de componentes > Cajoncito de fusibles",
        ]

    def test_rodamiento_at_threshold(self, db, seeded):
        stock = asyncio.run(StockCalculator.for_session(db).calculate_repuesto_stock("rep-2"))

        assert stock.total_stock == 4
        assert stock.is_low_stock is True
        assert [location.location_path for location in stock.locations] == [
            "Almacén Central > Armario Principal > Cajón Herramientas > División Tornillería",
            "Almacén Central > Estantería FRX > Cajón Filtros",
        ]

    def test_rodamiento_with_zero_quantities(self, db, seeded):
        stock = asyncio.run(StockCalculator.for_session(db).calculate_repuesto_stock(
            "rep-2", StockCalculationOptions(include_zero_quantities=True)
        ))

        assert len(stock.locations) == 3
        assert stock.locations[2].location_path == "Almacén Central > Estantería FRX > Estante Superior"
        assert stock.total_stock == 4

    def test_componente_total(self, db, seeded):
        stock = asyncio.run(StockCalculator.for_session(db).calculate_componente_stock("comp-1"))

        assert stock.total_stock == 120
        assert stock.locations[0].location_path == \
            "Almacén Central > Estantería FRX > Organizador SMD > Cajoncito resistencias"

    def test_inactive_repuesto_not_found(self, db, seeded):
        calc = StockCalculator.for_session(db)

        with pytest.raises(ItemNotFoundError):
            asyncio.run(calc.calculate_repuesto_stock("rep-4"))

        stock = asyncio.run(calc.calculate_repuesto_stock(
            "rep-4", StockCalculationOptions(include_inactive_items=True)
        ))
        assert stock.is_low_stock is True

    def test_low_stock_items(self, db, seeded):
        calc = StockCalculator.for_session(db)

        low = asyncio.run(calc.get_low_stock_items())
        low_with_inactive = asyncio.run(calc.get_low_stock_items(
            StockCalculationOptions(include_inactive_items=True)
        ))

        assert [stock.item_id for stock in low] == ["rep-2"]
        assert [stock.item_id for stock in low_with_inactive] == ["rep-2", "rep-4"]

    def test_recalculate_all(self, db, seeded):
        result = asyncio.run(StockCalculator.for_session(db).recalculate_all_stock())

        assert result.summary.total_repuestos == 3
        assert result.summary.total_componentes == 2
        assert result.summary.low_stock_repuestos == 1

    def test_dangling_anchor(self, db, seeded):
        """Sin claves foráneas activas en SQLite se puede simular un nodo borrado"""
        db.add(RepuestoUbicacion(id="ru-99", repuesto_id="rep-3", armario_id="arm-borrado", cantidad=4))
        db.commit()

        stock = asyncio.run(StockCalculator.for_session(db).calculate_repuesto_stock("rep-3"))

        assert stock.total_stock == 6
        orphan = next(location for location in stock.locations if location.quantity == 4)
        assert orphan.location_path == "Unknown"
        assert orphan.location_id == ""

    def test_broken_chain_keeps_suffix(self, db, seeded):
        db.add(Armario(id="arm-suelto", codigo="ARM-999", nombre="Armario suelto", ubicacion_id="ubic-borrada"))
        db.add(RepuestoUbicacion(id="ru-98", repuesto_id="rep-3", armario_id="arm-suelto", cantidad=1))
        db.commit()

        stock = asyncio.run(StockCalculator.for_session(db).calculate_repuesto_stock("rep-3"))

        paths = [location.location_path for location in stock.locations]
        assert "Armario suelto" in paths
