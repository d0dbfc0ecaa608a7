import math
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

def paginate(items: Sequence[T], page: int, limit: int) -> Tuple[List[T], int]:
    """Página 1-indexada de `items` y número total de páginas"""
    start_index = (page - 1) * limit
    total_pages = math.ceil(len(items) / limit) if limit else 0
    return list(items[start_index:start_index + limit]), total_pages
