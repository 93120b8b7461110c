from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
import uuid

from okr_app.core.progress import evaluate, format_value, calculation_method_description
from okr_app.core.timeline import calculate_ideal_progress, timeline_status
from okr_app.models import KeyResult, CheckIn, Cycle
from okr_app.schemas import KRCreate, KRUpdate, KROut, ProgressOut, CheckInOut
from .base import BaseRepository, enum_value


def progress_out(record, has_updates: bool, cycle: Optional[Cycle] = None) -> ProgressOut:
    """ProgressOut for any measurable row, with a timeline status when a cycle is known."""
    summary = evaluate(record, has_updates=has_updates)
    timeline = None
    if cycle is not None:
        ideal = calculate_ideal_progress(cycle.start_date, cycle.end_date)
        timeline = timeline_status(summary.percentage, ideal)
    return ProgressOut(
        percentage=summary.percentage,
        status_label=summary.status_label,
        is_completed=summary.is_completed,
        is_valid=summary.is_valid,
        timeline_status=timeline,
    )


class KeyResultRepository(BaseRepository[KeyResult, KRCreate, KRUpdate]):
    """Repository for KeyResult and CheckIn operations."""

    id_prefix = "kr"

    def __init__(self, db: Session):
        super().__init__(db, KeyResult)

    def add_check_in(self, key_result: KeyResult, value: float, notes: Optional[str]) -> CheckIn:
        """Record a check-in and move the key result's current value to it."""
        check_in = CheckIn(
            id=f"checkin_{uuid.uuid4()}",
            key_result_id=key_result.id,
            value=value,
            notes=notes,
        )
        self.db.add(check_in)
        key_result.current_value = value
        self.db.flush()
        self.db.refresh(check_in)
        self.db.refresh(key_result)
        return check_in

    def list_check_ins(self, key_result_id: str) -> List[CheckIn]:
        return list(self.db.execute(
            select(CheckIn)
            .where(CheckIn.key_result_id == key_result_id)
            .order_by(CheckIn.created_at.desc())
        ).scalars().all())

    def check_in_to_schema(self, check_in: CheckIn) -> CheckInOut:
        return CheckInOut(
            id=check_in.id,
            key_result_id=check_in.key_result_id,
            value=check_in.value,
            notes=check_in.notes,
            created_at=check_in.created_at,
        )

    def to_schema(self, kr: KeyResult, cycle: Optional[Cycle] = None) -> KROut:
        """Convert KeyResult model to KROut with its computed progress."""
        kr_type = enum_value(kr.key_result_type)
        unit = enum_value(kr.unit)
        return KROut(
            id=kr.id,
            objective_id=kr.objective_id,
            title=kr.title,
            description=kr.description,
            key_result_type=kr_type,
            base_value=kr.base_value,
            current_value=kr.current_value,
            target_value=kr.target_value,
            unit=unit,
            display_current=format_value(kr.current_value, unit),
            display_target=format_value(kr.target_value, unit),
            calculation_method=calculation_method_description(kr_type),
            progress=progress_out(kr, has_updates=bool(kr.check_ins), cycle=cycle),
            created_at=kr.created_at,
            updated_at=kr.updated_at,
        )
