from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from okr_app.core.timeline import cycle_status, cycle_change_reason
from okr_app.repositories import CycleRepository
from okr_app.repositories.base import enum_value
from okr_app.schemas import CycleCreate, CycleOut, CycleStatusChange
from okr_app.exceptions import ValidationError
from .base import BaseService


class CycleService(BaseService):
    """Service for OKR cycles (planning periods)."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.cycle_repo = CycleRepository(db)

    def create_cycle(self, cycle_in: CycleCreate, today: Optional[date] = None) -> CycleOut:
        """Create a cycle; its status is derived from its dates."""
        try:
            self.logger.info(f"Creating cycle: {cycle_in.name}")

            self.require_text(cycle_in.name, "Cycle name")
            if cycle_in.end_date < cycle_in.start_date:
                raise ValidationError(
                    "Cycle end date must not be before its start date",
                    details={"start_date": str(cycle_in.start_date), "end_date": str(cycle_in.end_date)},
                )

            cycle = self.cycle_repo.create(
                cycle_in,
                status=cycle_status(cycle_in.start_date, cycle_in.end_date, today),
            )
            self.commit()

            self.logger.info(f"Cycle created successfully: {cycle.id}")
            return self.cycle_repo.to_schema(cycle)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to create cycle: {str(e)}")
            raise

    def get_cycle(self, cycle_id: str) -> CycleOut:
        self.logger.debug(f"Fetching cycle: {cycle_id}")
        cycle = self.require(self.cycle_repo.get(cycle_id), "Cycle", cycle_id)
        return self.cycle_repo.to_schema(cycle)

    def list_cycles(self) -> List[CycleOut]:
        self.logger.debug("Listing cycles")
        return [self.cycle_repo.to_schema(c) for c in self.cycle_repo.list_ordered()]

    def delete_cycle(self, cycle_id: str) -> bool:
        """Delete a cycle; its objectives stay and lose their cycle link."""
        try:
            self.logger.info(f"Deleting cycle: {cycle_id}")
            self.require(self.cycle_repo.get(cycle_id), "Cycle", cycle_id)

            deleted = self.cycle_repo.delete(cycle_id)
            self.commit()

            self.logger.info(f"Cycle deleted successfully: {cycle_id}")
            return deleted

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to delete cycle {cycle_id}: {str(e)}")
            raise

    def refresh_statuses(self, today: Optional[date] = None) -> List[CycleStatusChange]:
        """Recompute every cycle status from its dates and persist the changes."""
        try:
            cycles = self.cycle_repo.list_ordered()
            self.logger.info(f"Checking cycle statuses for {len(cycles)} cycles")

            changes = []
            for cycle in cycles:
                old_status = enum_value(cycle.status)
                new_status = cycle_status(cycle.start_date, cycle.end_date, today)
                if new_status == old_status:
                    continue

                cycle.status = new_status
                changes.append(CycleStatusChange(
                    id=cycle.id,
                    old_status=old_status,
                    new_status=new_status,
                    reason=cycle_change_reason(old_status, new_status),
                ))
                self.logger.info(f"Cycle '{cycle.name}' moved from {old_status} to {new_status}")

            self.commit()
            self.logger.info(f"Cycle status refresh completed, updated {len(changes)} cycles")
            return changes

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to refresh cycle statuses: {str(e)}")
            raise
