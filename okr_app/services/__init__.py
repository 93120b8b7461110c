from .base import BaseService
from .cycle import CycleService
from .objective import ObjectiveService
from .key_result import KeyResultService
from .initiative import InitiativeService

__all__ = [
    "BaseService",
    "CycleService",
    "ObjectiveService",
    "KeyResultService",
    "InitiativeService"
]
