from pydantic import BaseModel
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    """Sobre común de todas las respuestas de la API"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    details: Optional[List[Any]] = None
