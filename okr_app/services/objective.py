from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from okr_app.core.config import settings
from okr_app.core.progress import average_progress
from okr_app.core.timeline import calculate_ideal_progress, objective_status
from okr_app.models import Objective
from okr_app.repositories import ObjectiveRepository, KeyResultRepository, CycleRepository, InitiativeRepository
from okr_app.repositories.base import enum_value
from okr_app.schemas import (
    ObjectiveCreate, ObjectiveUpdate, ObjectiveOut, ObjectiveDetail, ObjectiveNode,
    KRCreate, KROut, KRNode,
)
from okr_app.exceptions import ValidationError
from .base import BaseService


class ObjectiveService(BaseService):
    """Service for objectives and the key results under them."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.objective_repo = ObjectiveRepository(db)
        self.kr_repo = KeyResultRepository(db)
        self.cycle_repo = CycleRepository(db)
        self.initiative_repo = InitiativeRepository(db)

    def _validate_links(self, objective_id: Optional[str], cycle_id: Optional[str], parent_id: Optional[str]) -> None:
        if cycle_id is not None:
            self.require(self.cycle_repo.get(cycle_id), "Cycle", cycle_id)
        if parent_id is not None:
            self.require(self.objective_repo.get(parent_id), "Objective", parent_id)
            if objective_id is not None:
                if parent_id == objective_id:
                    raise ValidationError("Objective cannot be its own parent")
                if self.objective_repo.is_descendant(parent_id, objective_id):
                    raise ValidationError("Objective parent would create a cycle in the hierarchy")

    def create_objective(self, objective_in: ObjectiveCreate) -> ObjectiveOut:
        """Create a new objective."""
        try:
            self.logger.info(f"Creating objective: {objective_in.title}")

            self.require_text(objective_in.title, "Objective title")
            self._validate_links(None, objective_in.cycle_id, objective_in.parent_id)

            objective = self.objective_repo.create(objective_in)
            self.commit()

            self.logger.info(f"Objective created successfully: {objective.id}")
            return self.objective_repo.to_schema(objective)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to create objective: {str(e)}")
            raise

    def get_objective(self, objective_id: str) -> ObjectiveOut:
        self.logger.debug(f"Fetching objective: {objective_id}")
        objective = self.require(self.objective_repo.get(objective_id), "Objective", objective_id)
        return self.objective_repo.to_schema(objective)

    def list_objectives(self, cycle_id: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[ObjectiveOut]:
        self.logger.debug("Listing objectives")

        if limit > settings.max_page_size:
            raise ValidationError(f"Limit cannot exceed {settings.max_page_size}")

        objectives = self.objective_repo.get_multi_filtered(cycle_id=cycle_id, skip=skip, limit=limit)
        return [self.objective_repo.to_schema(o) for o in objectives]

    def update_objective(self, objective_id: str, objective_update: ObjectiveUpdate) -> ObjectiveOut:
        """Update an objective (partial update)."""
        try:
            self.logger.info(f"Updating objective: {objective_id}")

            objective = self.require(self.objective_repo.get(objective_id), "Objective", objective_id)
            changes = objective_update.model_dump(exclude_unset=True)
            self.require_present(changes, ("status",))

            if "title" in changes:
                self.require_text(changes["title"], "Objective title")
            self._validate_links(objective_id, changes.get("cycle_id"), changes.get("parent_id"))

            objective = self.objective_repo.update(objective, changes)
            self.commit()

            self.logger.info(f"Objective updated successfully: {objective_id}")
            return self.objective_repo.to_schema(objective)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to update objective {objective_id}: {str(e)}")
            raise

    def delete_objective(self, objective_id: str) -> bool:
        """Delete an objective together with its key results."""
        try:
            self.logger.info(f"Deleting objective: {objective_id}")
            self.require(self.objective_repo.get(objective_id), "Objective", objective_id)

            deleted = self.objective_repo.delete(objective_id)
            self.commit()

            self.logger.info(f"Objective deleted successfully: {objective_id}")
            return deleted

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to delete objective {objective_id}: {str(e)}")
            raise

    def _rollup(self, objective: Objective, key_results: List[KROut]):
        """Overall progress, derived status and time progress of an objective."""
        percentages = [kr.progress.percentage for kr in key_results]
        time_progress = 0.0
        if objective.cycle is not None:
            time_progress = calculate_ideal_progress(objective.cycle.start_date, objective.cycle.end_date)
        status = objective_status(enum_value(objective.status), percentages, time_progress)
        return average_progress(percentages), status, round(time_progress, 2)

    def get_objective_detail(self, objective_id: str) -> ObjectiveDetail:
        """Objective with its key results, their progress and the objective rollup."""
        self.logger.debug(f"Fetching objective detail: {objective_id}")

        objective = self.require(
            self.objective_repo.get_with_key_results(objective_id), "Objective", objective_id
        )
        key_results = [self.kr_repo.to_schema(kr, cycle=objective.cycle) for kr in objective.key_results]
        overall, status, time_progress = self._rollup(objective, key_results)

        return ObjectiveDetail(
            **self.objective_repo.to_schema(objective).model_dump(),
            overall_progress=overall,
            objective_status=status,
            time_progress=time_progress,
            key_results=key_results,
        )

    def get_tree(self, cycle_id: Optional[str] = None) -> List[ObjectiveNode]:
        """Dashboard tree: objectives nested by parent, each with KRs and initiative scores."""
        self.logger.debug(f"Building objective tree (cycle={cycle_id})")

        objectives = self.objective_repo.get_tree_rows(cycle_id=cycle_id)
        nodes: Dict[str, ObjectiveNode] = {}

        for objective in objectives:
            key_results = []
            for kr in objective.key_results:
                kr_out = self.kr_repo.to_schema(kr, cycle=objective.cycle)
                key_results.append(KRNode(
                    **kr_out.model_dump(),
                    initiatives=[self.initiative_repo.to_summary(i) for i in kr.initiatives],
                ))
            overall, status, _ = self._rollup(objective, key_results)
            nodes[objective.id] = ObjectiveNode(
                **self.objective_repo.to_schema(objective).model_dump(),
                overall_progress=overall,
                objective_status=status,
                key_results=key_results,
            )

        roots = []
        for objective in objectives:
            node = nodes[objective.id]
            parent = nodes.get(objective.parent_id) if objective.parent_id else None
            if parent is not None:
                parent.children.append(node)
            else:
                roots.append(node)
        return roots

    def create_key_result(self, objective_id: str, kr_in: KRCreate) -> KROut:
        """Create a key result under an objective."""
        try:
            self.logger.info(f"Creating key result for objective: {objective_id}")

            objective = self.require(self.objective_repo.get(objective_id), "Objective", objective_id)
            self.require_text(kr_in.title, "Key result title")
            self.check_measurable(kr_in.key_result_type, kr_in.target_value, kr_in.base_value)

            current = kr_in.current_value
            if current is None:
                current = kr_in.base_value if kr_in.base_value is not None else 0.0

            kr = self.kr_repo.create(kr_in, objective_id=objective.id, current_value=current)
            self.commit()

            self.logger.info(f"Key result created successfully: {kr.id}")
            return self.kr_repo.to_schema(kr, cycle=objective.cycle)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to create key result for objective {objective_id}: {str(e)}")
            raise
