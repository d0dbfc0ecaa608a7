# app/modules/locations/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc

from app.shared.database.models import STORAGE_NODE_MODELS
from app.modules.stock.domain import LocationType

class LocationRepository:
    """
    Consultas sobre el árbol de almacenamiento: hijos directos de un nodo y
    existencia de un ID en la tabla de un tipo concreto.
    """

    def __init__(self, db: Session):
        self.db = db

    async def find_children(
        self,
        parent_type: LocationType,
        parent_id: str,
        child_type: LocationType
    ) -> List[str]:
        """IDs de los nodos `child_type` cuyo padre `parent_type` es `parent_id`"""
        child_model = STORAGE_NODE_MODELS[child_type.value]
        parent_column = getattr(child_model, f"{parent_type.value}_id", None)
        if parent_column is None:
            raise ValueError(f"{child_type.value} no tiene padre de tipo {parent_type.value}")

        rows = self.db.query(child_model.id)\
            .filter(parent_column == parent_id)\
            .order_by(asc(child_model.created_at), asc(child_model.id))\
            .all()
        return [row.id for row in rows]

    async def find_by_id(self, location_type: LocationType, location_id: str) -> Optional[str]:
        model = STORAGE_NODE_MODELS[location_type.value]
        row = self.db.query(model.id).filter(model.id == location_id).first()
        return row.id if row else None
