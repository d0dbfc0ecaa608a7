# app/modules/stock/paths.py
import logging
from typing import Iterable, Optional

from .domain import Placement

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "
UNKNOWN_LOCATION = "Unknown"


def format_location_path(names: Iterable[Optional[str]]) -> str:
    """Une nombres de la raíz a la hoja: "Almacén Central > Armario Principal"."""
    segments = [name for name in names if name and name.strip()]
    if not segments:
        return UNKNOWN_LOCATION
    return PATH_SEPARATOR.join(segments)


def build_location_path(placement: Placement) -> str:
    """Ruta legible del nodo de anclaje de una asociación"""
    if placement.node is None:
        logger.warning(
            f"Asociación {placement.id} apunta a {placement.anchor.location_type.value} "
            f"{placement.anchor.location_id} inexistente"
        )
        return UNKNOWN_LOCATION

    if not placement.chain_complete:
        logger.warning(
            f"Cadena de ubicaciones incompleta para {placement.anchor.location_type.value} "
            f"{placement.node.id} (asociación {placement.id})"
        )

    names = [ancestor.nombre for ancestor in placement.ancestors]
    names.append(placement.node.nombre)
    return format_location_path(names)
