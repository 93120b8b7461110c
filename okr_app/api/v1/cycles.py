from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from okr_app.db import get_db
from okr_app.services import CycleService
from okr_app.schemas import CycleCreate, CycleOut, CycleStatusChange

router = APIRouter()


def get_cycle_service(db: Session = Depends(get_db)) -> CycleService:
    """Dependency to get CycleService instance."""
    return CycleService(db)


@router.post("", response_model=CycleOut, status_code=201)
def create_cycle(
    payload: CycleCreate,
    cycle_service: CycleService = Depends(get_cycle_service)
):
    return cycle_service.create_cycle(payload)


@router.get("", response_model=List[CycleOut])
def list_cycles(cycle_service: CycleService = Depends(get_cycle_service)):
    return cycle_service.list_cycles()


@router.post("/refresh-status", response_model=List[CycleStatusChange])
def refresh_cycle_statuses(cycle_service: CycleService = Depends(get_cycle_service)):
    """Recompute cycle statuses from today's date and return what changed."""
    return cycle_service.refresh_statuses()


@router.get("/{cycle_id}", response_model=CycleOut)
def get_cycle(
    cycle_id: str,
    cycle_service: CycleService = Depends(get_cycle_service)
):
    return cycle_service.get_cycle(cycle_id)


@router.delete("/{cycle_id}", status_code=204)
def delete_cycle(
    cycle_id: str,
    cycle_service: CycleService = Depends(get_cycle_service)
):
    cycle_service.delete_cycle(cycle_id)
    return None
