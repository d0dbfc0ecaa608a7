"""
Tests del contenido y las estadísticas de una ubicación
"""
import asyncio

import pytest

from app.core.exceptions import LocationNotFoundError
from app.modules.locations.schemas import ContentsFilter
from app.modules.locations.service import LocationContentsService
from app.modules.stock.domain import LocationType
from app.modules.stock.schemas import StockCalculationOptions
from fakes import FakeAssociationStore, FakeChildrenStore, FakeNodeProbe


def contents(db, location_id, **kwargs):
    return asyncio.run(LocationContentsService.for_session(db).get_location_contents(location_id, **kwargs))


class TestResolveLocationType:

    def test_probe_order_first_match_wins(self):
        """Un ID repetido en dos tablas se resuelve por el orden fijo de sondeo"""
        probe = FakeNodeProbe({
            LocationType.CAJON: ["dup-1"],
            LocationType.ARMARIO: ["dup-1"],
        })
        service = LocationContentsService(probe, FakeChildrenStore({}), FakeAssociationStore())

        assert asyncio.run(service.resolve_location_type("dup-1")) == LocationType.ARMARIO
        assert probe.probed == [LocationType.UBICACION, LocationType.ARMARIO]

    def test_unknown_id(self):
        probe = FakeNodeProbe({})
        service = LocationContentsService(probe, FakeChildrenStore({}), FakeAssociationStore())

        with pytest.raises(LocationNotFoundError, match="nope"):
            asyncio.run(service.resolve_location_type("nope"))
        assert len(probe.probed) == 8

    def test_every_node_type_is_recognised(self, db, seeded):
        service = LocationContentsService.for_session(db)
        expected = {
            "ubic-1": LocationType.UBICACION, "arm-1": LocationType.ARMARIO,
            "esta-1": LocationType.ESTANTERIA, "ste-1": LocationType.ESTANTE,
            "cjn-1": LocationType.CAJON, "div-1": LocationType.DIVISION,
            "org-1": LocationType.ORGANIZADOR, "cjt-1": LocationType.CAJONCITO,
        }
        for location_id, location_type in expected.items():
            assert asyncio.run(service.resolve_location_type(location_id)) == location_type


class TestLocationContents:

    def test_ubicacion_with_children(self, db, seeded):
        result = contents(db, "ubic-1")

        assert result.location_type == LocationType.UBICACION
        assert [item.association_id for item in result.items] == ["ru-1", "ru-3", "ru-5", "ru-6", "cu-1", "cu-3"]
        assert result.summary.total_items == 6
        assert result.summary.repuestos_count == 20
        assert result.summary.componentes_count == 150

    def test_organizadores_of_armario_are_not_walked(self, db, seeded):
        """Desde el armario sólo se baja por cajones: el cajoncito del organizador queda fuera"""
        result = contents(db, "ubic-1")
        association_ids = {item.association_id for item in result.items}

        assert "ru-2" not in association_ids
        assert "cu-2" not in association_ids

    def test_without_children_is_subset(self, db, seeded):
        with_children = contents(db, "arm-1")
        only_node = contents(db, "arm-1", include_children=False)

        assert [item.association_id for item in with_children.items] == ["ru-1", "ru-3"]
        assert [item.association_id for item in only_node.items] == ["ru-1"]
        assert {item.association_id for item in only_node.items} <= \
            {item.association_id for item in with_children.items}

    def test_ubicacion_alone_holds_nothing(self, db, seeded):
        result = contents(db, "ubic-1", include_children=False)

        assert result.items == []
        assert result.summary.total_items == 0
        assert result.summary.total_pages == 0

    def test_inactive_repuestos_excluded(self, db, seeded):
        result = contents(db, "cjn-1")
        assert "ru-7" not in {item.association_id for item in result.items}

    def test_cajoncito_holds_both_kinds(self, db, seeded):
        result = contents(db, "cjt-1")

        assert [(item.item_type.value, item.item_id) for item in result.items] == [
            ("repuesto", "rep-1"), ("componente", "comp-1")
        ]
        componente = result.items[1]
        assert componente.item_code == "RESISTENCIA-comp-1"
        assert componente.location.location_path == \
            "Almacén Central > Armario Principal > Organizador de componentes > Cajoncito de fusibles"

    def test_componentes_only_come_from_cajoncitos(self, db, seeded):
        result = contents(db, "esta-1", item_type=ContentsFilter.COMPONENTES)

        assert {item.location.location_type for item in result.items} == {LocationType.CAJONCITO}
        assert result.summary.repuestos_count == 0
        assert result.summary.componentes_count == 150

    def test_repuestos_filter(self, db, seeded):
        result = contents(db, "ubic-1", item_type=ContentsFilter.REPUESTOS)

        assert {item.item_type.value for item in result.items} == {"repuesto"}
        assert result.summary.componentes_count == 0

    def test_pagination(self, db, seeded):
        first = contents(db, "ubic-1", page=1, limit=4)
        second = contents(db, "ubic-1", page=2, limit=4)
        beyond = contents(db, "ubic-1", page=3, limit=4)

        assert len(first.items) == 4
        assert [item.association_id for item in second.items] == ["cu-1", "cu-3"]
        assert beyond.items == []
        assert first.summary.total_pages == second.summary.total_pages == 2
        assert second.summary.current_page == 2
        assert second.summary.total_items == 6

    def test_unknown_location(self, db, seeded):
        with pytest.raises(LocationNotFoundError):
            contents(db, "no-existe")


class TestLocationDescendants:

    def test_ubicacion_descendants(self, db, seeded):
        result = asyncio.run(LocationContentsService.for_session(db).get_location_descendants("ubic-1"))

        assert [node.location_id for node in result.descendants] == [
            "arm-1", "cjn-1", "div-1", "esta-1", "ste-1", "org-2", "cjt-2"
        ]
        assert result.total == 7


class TestLocationStats:

    def test_units_by_category(self, db, seeded):
        stats = asyncio.run(LocationContentsService.for_session(db).get_location_stock_stats("ubic-1"))

        assert stats.repuesto_types == {"ELECTRICO": 15, "MECANICO": 3, "Sin categoría": 2}
        assert stats.componente_types == {"RESISTENCIA": 100, "CAPACITOR": 50}
        assert stats.total_repuestos == 20
        assert stats.total_componentes == 150
        assert stats.total_items == 170

    def test_inactive_items_on_request(self, db, seeded):
        service = LocationContentsService.for_session(db)

        default = asyncio.run(service.get_location_stock_stats("cjn-1"))
        with_inactive = asyncio.run(service.get_location_stock_stats(
            "cjn-1", StockCalculationOptions(include_inactive_items=True)
        ))

        assert default.total_repuestos == 3
        assert with_inactive.total_repuestos == 4
