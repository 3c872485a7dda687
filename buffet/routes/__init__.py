from .shelves import router as shelves_routes
from .stacks import router as stacks_routes
from .dishes import router as dishes_routes

__all__ = [
    "shelves_routes",
    "stacks_routes",
    "dishes_routes",
]
