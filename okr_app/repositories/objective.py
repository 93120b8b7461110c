from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select

from okr_app.models import Objective, KeyResult, Initiative, SuccessMetric
from okr_app.schemas import ObjectiveCreate, ObjectiveUpdate, ObjectiveOut
from .base import BaseRepository, enum_value


class ObjectiveRepository(BaseRepository[Objective, ObjectiveCreate, ObjectiveUpdate]):
    """Repository for Objective operations."""

    id_prefix = "obj"

    def __init__(self, db: Session):
        super().__init__(db, Objective)

    def get_with_key_results(self, objective_id: str) -> Optional[Objective]:
        """Objective with key results and their check-ins loaded in batched queries."""
        return self.db.execute(
            select(Objective)
            .where(Objective.id == objective_id)
            .options(
                selectinload(Objective.cycle),
                selectinload(Objective.key_results).selectinload(KeyResult.check_ins),
            )
        ).scalar_one_or_none()

    def get_multi_filtered(
        self,
        cycle_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Objective]:
        query = select(Objective)
        if cycle_id:
            query = query.where(Objective.cycle_id == cycle_id)
        return list(self.db.execute(
            query.order_by(Objective.created_at.desc()).offset(skip).limit(limit)
        ).scalars().all())

    def get_tree_rows(self, cycle_id: Optional[str] = None) -> List[Objective]:
        """Every objective with the whole KR/initiative/metric subtree eagerly loaded."""
        query = select(Objective).options(
            selectinload(Objective.cycle),
            selectinload(Objective.key_results).selectinload(KeyResult.check_ins),
            selectinload(Objective.key_results)
            .selectinload(KeyResult.initiatives)
            .selectinload(Initiative.success_metrics)
            .selectinload(SuccessMetric.updates),
        )
        if cycle_id:
            query = query.where(Objective.cycle_id == cycle_id)
        return list(self.db.execute(query.order_by(Objective.created_at)).scalars().all())

    def is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """True when ``candidate_id`` sits somewhere below ``ancestor_id``."""
        current = self.get(candidate_id)
        seen = set()
        while current is not None and current.parent_id and current.id not in seen:
            if current.parent_id == ancestor_id:
                return True
            seen.add(current.id)
            current = self.get(current.parent_id)
        return False

    def to_schema(self, objective: Objective) -> ObjectiveOut:
        """Convert Objective model to ObjectiveOut schema."""
        return ObjectiveOut(
            id=objective.id,
            title=objective.title,
            description=objective.description,
            owner=objective.owner,
            cycle_id=objective.cycle_id,
            parent_id=objective.parent_id,
            status=enum_value(objective.status),
            created_at=objective.created_at,
        )
