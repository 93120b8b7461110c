from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from okr_app.db import get_db
from okr_app.services import KeyResultService
from okr_app.schemas import (
    KRUpdate, KROut, CheckInCreate, CheckInOut, CheckInResult, InitiativeCreate, InitiativeOut,
)

router = APIRouter()


def get_key_result_service(db: Session = Depends(get_db)) -> KeyResultService:
    """Dependency to get KeyResultService instance."""
    return KeyResultService(db)


@router.get("/{kr_id}", response_model=KROut)
def get_key_result(
    kr_id: str,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    return kr_service.get_key_result(kr_id)


@router.patch("/{kr_id}", response_model=KROut)
def update_key_result(
    kr_id: str,
    kr_update: KRUpdate,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    """Update a key result definition."""
    return kr_service.update_key_result(kr_id, kr_update)


@router.delete("/{kr_id}", status_code=204)
def delete_key_result(
    kr_id: str,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    kr_service.delete_key_result(kr_id)
    return None


@router.post("/{kr_id}/check-ins", response_model=CheckInResult, status_code=201)
def create_check_in(
    kr_id: str,
    payload: CheckInCreate,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    """Record a check-in and return the key result with its new progress."""
    return kr_service.check_in(kr_id, payload)


@router.get("/{kr_id}/check-ins", response_model=List[CheckInOut])
def list_check_ins(
    kr_id: str,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    """Check-in history, newest first."""
    return kr_service.list_check_ins(kr_id)


@router.post("/{kr_id}/initiatives", response_model=InitiativeOut, status_code=201)
def create_initiative(
    kr_id: str,
    payload: InitiativeCreate,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    return kr_service.create_initiative(kr_id, payload)


@router.get("/{kr_id}/initiatives", response_model=List[InitiativeOut])
def list_initiatives(
    kr_id: str,
    kr_service: KeyResultService = Depends(get_key_result_service)
):
    return kr_service.list_initiatives(kr_id)
