from sqlalchemy.orm import Session

from okr_app.models import InitiativeStatusEnum
from okr_app.repositories import InitiativeRepository
from okr_app.repositories.base import enum_value
from okr_app.schemas import (
    InitiativeUpdate, InitiativeOut, MetricCreate, MetricOut, MetricUpdateCreate, MetricsDashboard,
)
from .base import BaseService

# Statuses that automatic activity tracking never overrides
CLOSED_STATUSES = (InitiativeStatusEnum.completed.value, InitiativeStatusEnum.canceled.value)


class InitiativeService(BaseService):
    """Service for initiatives and their success metrics."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.initiative_repo = InitiativeRepository(db)

    def _get(self, initiative_id: str):
        return self.require(
            self.initiative_repo.get_with_metrics(initiative_id), "Initiative", initiative_id
        )

    def get_initiative(self, initiative_id: str) -> InitiativeOut:
        self.logger.debug(f"Fetching initiative: {initiative_id}")
        return self.initiative_repo.to_schema(self._get(initiative_id))

    def update_initiative(self, initiative_id: str, initiative_update: InitiativeUpdate) -> InitiativeOut:
        try:
            self.logger.info(f"Updating initiative: {initiative_id}")

            initiative = self._get(initiative_id)
            changes = initiative_update.model_dump(exclude_unset=True)
            self.require_present(changes, ("status",))
            if "title" in changes:
                self.require_text(changes["title"], "Initiative title")

            initiative = self.initiative_repo.update(initiative, changes)
            self.commit()

            self.logger.info(f"Initiative updated successfully: {initiative_id}")
            return self.initiative_repo.to_schema(initiative)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to update initiative {initiative_id}: {str(e)}")
            raise

    def delete_initiative(self, initiative_id: str) -> bool:
        try:
            self.logger.info(f"Deleting initiative: {initiative_id}")
            self._get(initiative_id)

            deleted = self.initiative_repo.delete(initiative_id)
            self.commit()

            self.logger.info(f"Initiative deleted successfully: {initiative_id}")
            return deleted

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to delete initiative {initiative_id}: {str(e)}")
            raise

    def add_metric(self, initiative_id: str, metric_in: MetricCreate) -> MetricOut:
        """Attach a success metric to an initiative."""
        try:
            self.logger.info(f"Adding success metric to initiative: {initiative_id}")

            initiative = self._get(initiative_id)
            self.require_text(metric_in.name, "Metric name")
            self.check_measurable(metric_in.type, metric_in.target_value, metric_in.base_value)

            metric = self.initiative_repo.add_metric(initiative, metric_in)
            self.commit()

            self.logger.info(f"Success metric created successfully: {metric.id}")
            return self.initiative_repo.metric_to_schema(metric)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to add metric to initiative {initiative_id}: {str(e)}")
            raise

    def record_metric_update(self, initiative_id: str, metric_id: str, update_in: MetricUpdateCreate) -> MetricOut:
        """Record a new metric value; a draft initiative becomes in_progress."""
        try:
            self.logger.info(f"Recording update for metric {metric_id} of initiative {initiative_id}")

            initiative = self._get(initiative_id)
            metric = self.require(
                self.initiative_repo.get_metric(initiative_id, metric_id), "Success metric", metric_id
            )
            self.initiative_repo.add_metric_update(metric, update_in.value, update_in.notes)

            status = enum_value(initiative.status)
            if status == InitiativeStatusEnum.draft.value:
                initiative.status = InitiativeStatusEnum.in_progress
                self.logger.info(f"Initiative {initiative_id} moved from draft to in_progress")
            elif status in CLOSED_STATUSES:
                self.logger.debug(f"Initiative {initiative_id} is {status}; status left unchanged")

            self.commit()
            return self.initiative_repo.metric_to_schema(metric)

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to record update for metric {metric_id}: {str(e)}")
            raise

    def delete_metric(self, initiative_id: str, metric_id: str) -> bool:
        try:
            self.logger.info(f"Deleting success metric: {metric_id}")

            self._get(initiative_id)
            metric = self.require(
                self.initiative_repo.get_metric(initiative_id, metric_id), "Success metric", metric_id
            )
            self.db.delete(metric)
            self.commit()

            self.logger.info(f"Success metric deleted successfully: {metric_id}")
            return True

        except Exception as e:
            self.rollback()
            self.logger.error(f"Failed to delete metric {metric_id}: {str(e)}")
            raise

    def get_dashboard(self, initiative_id: str) -> MetricsDashboard:
        """Overall success-metric score of an initiative."""
        self.logger.debug(f"Building metrics dashboard for initiative: {initiative_id}")
        return self.initiative_repo.dashboard(self._get(initiative_id))
