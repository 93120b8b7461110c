from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from okr_app.db import get_db
from okr_app.services import ObjectiveService
from okr_app.schemas import (
    ObjectiveCreate, ObjectiveUpdate, ObjectiveOut, ObjectiveDetail, ObjectiveNode, KRCreate, KROut,
)

router = APIRouter()


def get_objective_service(db: Session = Depends(get_db)) -> ObjectiveService:
    """Dependency to get ObjectiveService instance."""
    return ObjectiveService(db)


@router.post("", response_model=ObjectiveOut, status_code=201)
def create_objective(
    payload: ObjectiveCreate,
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """Create a new objective."""
    return objective_service.create_objective(payload)


@router.get("", response_model=List[ObjectiveOut])
def list_objectives(
    cycle_id: Optional[str] = Query(None, description="Only objectives of this cycle"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """List objectives, newest first."""
    return objective_service.list_objectives(cycle_id=cycle_id, skip=skip, limit=limit)


# Must come before /{objective_id}
@router.get("/tree", response_model=List[ObjectiveNode])
def get_objective_tree(
    cycle_id: Optional[str] = Query(None, description="Only objectives of this cycle"),
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """Dashboard tree of objectives with key result progress and initiative scores."""
    return objective_service.get_tree(cycle_id=cycle_id)


@router.get("/{objective_id}", response_model=ObjectiveDetail)
def get_objective(
    objective_id: str,
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """Get an objective with its key results and overall progress."""
    return objective_service.get_objective_detail(objective_id)


@router.patch("/{objective_id}", response_model=ObjectiveOut)
def update_objective(
    objective_id: str,
    objective_update: ObjectiveUpdate,
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    return objective_service.update_objective(objective_id, objective_update)


@router.delete("/{objective_id}", status_code=204)
def delete_objective(
    objective_id: str,
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """Delete an objective and its key results."""
    objective_service.delete_objective(objective_id)
    return None


@router.post("/{objective_id}/krs", response_model=KROut, status_code=201)
def create_key_result(
    objective_id: str,
    kr: KRCreate,
    objective_service: ObjectiveService = Depends(get_objective_service)
):
    """Create a key result for an objective."""
    return objective_service.create_key_result(objective_id, kr)
