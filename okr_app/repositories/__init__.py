from .base import BaseRepository
from .cycle import CycleRepository
from .objective import ObjectiveRepository
from .key_result import KeyResultRepository
from .initiative import InitiativeRepository

__all__ = [
    "BaseRepository",
    "CycleRepository",
    "ObjectiveRepository",
    "KeyResultRepository",
    "InitiativeRepository"
]
