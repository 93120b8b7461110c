from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select

from okr_app.models import Cycle
from okr_app.schemas import CycleCreate, CycleOut
from .base import BaseRepository, enum_value


class CycleRepository(BaseRepository[Cycle, CycleCreate, dict]):
    """Repository for Cycle operations."""

    id_prefix = "cycle"

    def __init__(self, db: Session):
        super().__init__(db, Cycle)

    def list_ordered(self) -> List[Cycle]:
        """All cycles, most recent start first."""
        return list(self.db.execute(
            select(Cycle).order_by(Cycle.start_date.desc())
        ).scalars().all())

    def to_schema(self, cycle: Cycle) -> CycleOut:
        return CycleOut(
            id=cycle.id,
            name=cycle.name,
            start_date=cycle.start_date,
            end_date=cycle.end_date,
            status=enum_value(cycle.status),
            created_at=cycle.created_at,
        )
