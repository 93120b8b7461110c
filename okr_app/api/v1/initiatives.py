from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from okr_app.db import get_db
from okr_app.services import InitiativeService
from okr_app.schemas import (
    InitiativeUpdate, InitiativeOut, MetricCreate, MetricOut, MetricUpdateCreate, MetricsDashboard,
)

router = APIRouter()


def get_initiative_service(db: Session = Depends(get_db)) -> InitiativeService:
    """Dependency to get InitiativeService instance."""
    return InitiativeService(db)


@router.get("/{initiative_id}", response_model=InitiativeOut)
def get_initiative(
    initiative_id: str,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    return initiative_service.get_initiative(initiative_id)


@router.patch("/{initiative_id}", response_model=InitiativeOut)
def update_initiative(
    initiative_id: str,
    initiative_update: InitiativeUpdate,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    return initiative_service.update_initiative(initiative_id, initiative_update)


@router.delete("/{initiative_id}", status_code=204)
def delete_initiative(
    initiative_id: str,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    initiative_service.delete_initiative(initiative_id)
    return None


@router.get("/{initiative_id}/metrics-dashboard", response_model=MetricsDashboard)
def get_metrics_dashboard(
    initiative_id: str,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    """Overall success-metric score and per-metric progress."""
    return initiative_service.get_dashboard(initiative_id)


@router.post("/{initiative_id}/metrics", response_model=MetricOut, status_code=201)
def add_metric(
    initiative_id: str,
    payload: MetricCreate,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    return initiative_service.add_metric(initiative_id, payload)


@router.post("/{initiative_id}/metrics/{metric_id}/updates", response_model=MetricOut, status_code=201)
def record_metric_update(
    initiative_id: str,
    metric_id: str,
    payload: MetricUpdateCreate,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    """Record a new value for a success metric."""
    return initiative_service.record_metric_update(initiative_id, metric_id, payload)


@router.delete("/{initiative_id}/metrics/{metric_id}", status_code=204)
def delete_metric(
    initiative_id: str,
    metric_id: str,
    initiative_service: InitiativeService = Depends(get_initiative_service)
):
    initiative_service.delete_metric(initiative_id, metric_id)
    return None
