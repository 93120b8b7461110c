from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
import uuid

from okr_app.core.progress import average_progress, evaluate, format_value, status_label
from okr_app.models import Initiative, SuccessMetric, SuccessMetricUpdate
from okr_app.schemas import (
    InitiativeCreate, InitiativeUpdate, InitiativeOut, InitiativeSummary,
    MetricCreate, MetricOut, MetricUpdateOut, MetricsDashboard,
)
from .base import BaseRepository, enum_value
from .key_result import progress_out

NO_METRICS = "no_metrics"


def overall_score(metrics: List[SuccessMetric]) -> tuple:
    """Mean metric percentage and its status label."""
    if not metrics:
        return 0.0, NO_METRICS
    score = average_progress([evaluate(m).percentage for m in metrics])
    has_updates = any(m.updates for m in metrics)
    return score, status_label(score, has_updates=has_updates)


class InitiativeRepository(BaseRepository[Initiative, InitiativeCreate, InitiativeUpdate]):
    """Repository for Initiative and SuccessMetric operations."""

    id_prefix = "init"

    def __init__(self, db: Session):
        super().__init__(db, Initiative)

    def get_with_metrics(self, initiative_id: str) -> Optional[Initiative]:
        return self.db.execute(
            select(Initiative)
            .where(Initiative.id == initiative_id)
            .options(selectinload(Initiative.success_metrics).selectinload(SuccessMetric.updates))
        ).scalar_one_or_none()

    def get_metric(self, initiative_id: str, metric_id: str) -> Optional[SuccessMetric]:
        return self.db.execute(
            select(SuccessMetric).where(
                SuccessMetric.id == metric_id,
                SuccessMetric.initiative_id == initiative_id,
            )
        ).scalar_one_or_none()

    def add_metric(self, initiative: Initiative, metric_in: MetricCreate) -> SuccessMetric:
        metric = SuccessMetric(
            id=f"metric_{uuid.uuid4()}",
            initiative_id=initiative.id,
            **metric_in.model_dump(),
        )
        if metric.current_value is None:
            metric.current_value = metric.base_value if metric.base_value is not None else 0.0
        self.db.add(metric)
        self.db.flush()
        self.db.refresh(metric)
        return metric

    def add_metric_update(self, metric: SuccessMetric, value: float, notes: Optional[str]) -> SuccessMetricUpdate:
        update = SuccessMetricUpdate(
            id=f"mupd_{uuid.uuid4()}",
            metric_id=metric.id,
            value=value,
            notes=notes,
        )
        self.db.add(update)
        metric.current_value = value
        self.db.flush()
        self.db.refresh(update)
        self.db.refresh(metric)
        return update

    def metric_to_schema(self, metric: SuccessMetric) -> MetricOut:
        unit = enum_value(metric.unit)
        return MetricOut(
            id=metric.id,
            initiative_id=metric.initiative_id,
            name=metric.name,
            type=enum_value(metric.type),
            base_value=metric.base_value,
            current_value=metric.current_value,
            target_value=metric.target_value,
            unit=unit,
            display_current=format_value(metric.current_value, unit),
            display_target=format_value(metric.target_value, unit),
            progress=progress_out(metric, has_updates=bool(metric.updates)),
            updates=[self.update_to_schema(u) for u in metric.updates],
            created_at=metric.created_at,
        )

    def update_to_schema(self, update: SuccessMetricUpdate) -> MetricUpdateOut:
        return MetricUpdateOut(
            id=update.id,
            metric_id=update.metric_id,
            value=update.value,
            notes=update.notes,
            created_at=update.created_at,
        )

    def dashboard(self, initiative: Initiative) -> MetricsDashboard:
        metrics = list(initiative.success_metrics)
        score, label = overall_score(metrics)
        return MetricsDashboard(
            initiative_id=initiative.id,
            total_metrics=len(metrics),
            score=score,
            status_label=label,
            metrics=[self.metric_to_schema(m) for m in metrics],
        )

    def to_summary(self, initiative: Initiative) -> InitiativeSummary:
        score, label = overall_score(list(initiative.success_metrics))
        return InitiativeSummary(
            id=initiative.id,
            title=initiative.title,
            status=enum_value(initiative.status),
            score=score,
            status_label=label,
        )

    def to_schema(self, initiative: Initiative) -> InitiativeOut:
        return InitiativeOut(
            id=initiative.id,
            key_result_id=initiative.key_result_id,
            title=initiative.title,
            description=initiative.description,
            status=enum_value(initiative.status),
            created_at=initiative.created_at,
            dashboard=self.dashboard(initiative),
        )
