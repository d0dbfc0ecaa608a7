"""
Datos de demostración del almacén.

Crea una jerarquía pequeña pero completa (todas las clases de nodo), algunos
repuestos y componentes y sus asociaciones de ubicación. Se usa para poblar
una base nueva (`python -m app.shared.database.seed`) y como escenario de los
tests.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict

from sqlalchemy.orm import Session

from app.shared.database.models import (
    Ubicacion, Armario, Estanteria, Estante, Cajon, Division, Organizador, Cajoncito,
    Repuesto, Componente, RepuestoUbicacion, ComponenteUbicacion
)

logger = logging.getLogger(__name__)

SEED_EPOCH = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def seed_demo_data(db: Session) -> Dict[str, object]:
    """Inserta el escenario de demostración y devuelve los registros por clave"""
    logger.info("🏭 Creando jerarquía de almacenamiento...")

    almacen = Ubicacion(id="ubic-1", codigo="UBIC-001", nombre="Almacén Central",
                        descripcion="Almacén principal de repuestos")
    taller = Ubicacion(id="ubic-2", codigo="UBIC-002", nombre="Taller Norte")

    armario = Armario(id="arm-1", codigo="ARM-001", nombre="Armario Principal", ubicacion=almacen)
    estanteria = Estanteria(id="esta-1", codigo="EST-001", nombre="Estantería FRX", ubicacion=almacen)

    cajon_armario = Cajon(id="cjn-1", codigo="CAJ-ARM-001", nombre="Cajón Herramientas", armario=armario)
    cajon_estanteria = Cajon(id="cjn-2", codigo="CAJ-EST-001", nombre="Cajón Filtros", estanteria=estanteria)
    division = Division(id="div-1", codigo="DIV-001", nombre="División Tornillería", cajon=cajon_armario)
    estante = Estante(id="ste-1", codigo="STE-001", nombre="Estante Superior", estanteria=estanteria)

    organizador_armario = Organizador(id="org-1", codigo="ORG-001", nombre="Organizador de componentes",
                                      armario=armario)
    organizador_estanteria = Organizador(id="org-2", codigo="ORG-002", nombre="Organizador SMD",
                                         estanteria=estanteria)
    cajoncito_fusibles = Cajoncito(id="cjt-1", codigo="CAJ-001", nombre="Cajoncito de fusibles",
                                   organizador=organizador_armario)
    cajoncito_smd = Cajoncito(id="cjt-2", codigo="CAJ-002", nombre="Cajoncito resistencias",
                              organizador=organizador_estanteria)

    db.add_all([
        almacen, taller, armario, estanteria, cajon_armario, cajon_estanteria, division, estante,
        organizador_armario, organizador_estanteria, cajoncito_fusibles, cajoncito_smd
    ])

    logger.info("🔧 Creando repuestos y componentes...")

    fusible = Repuesto(id="rep-1", codigo="REP-001", nombre="Fusible 5A", categoria="ELECTRICO",
                       stock_minimo=10, created_at=SEED_EPOCH)
    rodamiento = Repuesto(id="rep-2", codigo="REP-002", nombre="Rodamiento 6204", categoria="MECANICO",
                          stock_minimo=4, created_at=SEED_EPOCH + timedelta(minutes=1))
    junta = Repuesto(id="rep-3", codigo="REP-003", nombre="Kit de juntas", stock_minimo=0,
                     created_at=SEED_EPOCH + timedelta(minutes=2))
    filtro_baja = Repuesto(id="rep-4", codigo="REP-004", nombre="Filtro descatalogado", stock_minimo=5,
                           is_active=False, created_at=SEED_EPOCH + timedelta(minutes=3))

    resistencia = Componente(id="comp-1", categoria="RESISTENCIA", descripcion="Resistencia carbón 1KΩ 1/4W 5%",
                             valor_unidad=[{"valor": "1K", "unidad": "Ω"}, {"valor": "1/4", "unidad": "W"}],
                             created_at=SEED_EPOCH)
    capacitor = Componente(id="comp-2", categoria="CAPACITOR", descripcion="Capacitor electrolítico 100µF 25V",
                           valor_unidad=[{"valor": "100", "unidad": "µF"}, {"valor": "25", "unidad": "V"}],
                           created_at=SEED_EPOCH + timedelta(minutes=1))

    db.add_all([fusible, rodamiento, junta, filtro_baja, resistencia, capacitor])

    logger.info("🔗 Creando asociaciones de ubicación...")

    def at(minutes: int) -> datetime:
        return SEED_EPOCH + timedelta(hours=1, minutes=minutes)

    db.add_all([
        # Fusible 5A: 15 en el armario + 5 en un cajoncito = 20 (mínimo 10)
        RepuestoUbicacion(id="ru-1", repuesto=fusible, armario=armario, cantidad=15, created_at=at(0)),
        RepuestoUbicacion(id="ru-2", repuesto=fusible, cajoncito=cajoncito_fusibles, cantidad=5, created_at=at(1)),
        # Rodamiento: 3 en una división + 1 en un cajón de estantería = 4 (justo el mínimo)
        RepuestoUbicacion(id="ru-3", repuesto=rodamiento, division=division, cantidad=3, created_at=at(2)),
        RepuestoUbicacion(id="ru-4", repuesto=rodamiento, cajon=cajon_estanteria, cantidad=1, created_at=at(3)),
        RepuestoUbicacion(id="ru-5", repuesto=rodamiento, estante=estante, cantidad=0, created_at=at(4)),
        # Kit de juntas: en la estantería, sin mínimo
        RepuestoUbicacion(id="ru-6", repuesto=junta, estanteria=estanteria, cantidad=2, created_at=at(5)),
        # Repuesto inactivo
        RepuestoUbicacion(id="ru-7", repuesto=filtro_baja, cajon=cajon_armario, cantidad=1, created_at=at(6)),
        ComponenteUbicacion(id="cu-1", componente=resistencia, cajoncito=cajoncito_smd, cantidad=100, created_at=at(7)),
        ComponenteUbicacion(id="cu-2", componente=resistencia, cajoncito=cajoncito_fusibles, cantidad=20, created_at=at(8)),
        ComponenteUbicacion(id="cu-3", componente=capacitor, cajoncito=cajoncito_smd, cantidad=50, created_at=at(9)),
    ])

    db.commit()
    logger.info("✅ Datos de demostración creados")

    return {
        "almacen": almacen, "taller": taller, "armario": armario, "estanteria": estanteria,
        "cajon_armario": cajon_armario, "cajon_estanteria": cajon_estanteria, "division": division,
        "estante": estante, "organizador_armario": organizador_armario,
        "organizador_estanteria": organizador_estanteria, "cajoncito_fusibles": cajoncito_fusibles,
        "cajoncito_smd": cajoncito_smd, "fusible": fusible, "rodamiento": rodamiento, "junta": junta,
        "filtro_baja": filtro_baja, "resistencia": resistencia, "capacitor": capacitor,
    }


if __name__ == "__main__":
    from app.config.database import Base, SessionLocal, engine
    from app.core.logging_config import setup_logging

    setup_logging()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_demo_data(session)
    finally:
        session.close()
